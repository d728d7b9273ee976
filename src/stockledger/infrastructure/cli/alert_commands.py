"""CLI commands for stock alert rules."""

from __future__ import annotations

import click

from stockledger.application.manage_alerts import (
    ConfigureAlertHandler,
    RemoveAlertHandler,
    ShowAlertsHandler,
)
from stockledger.domain.exceptions import DomainException
from stockledger.infrastructure.bootstrap import build_ledger
from stockledger.infrastructure.cli.common import sku_options, to_sku

_ALERT_TYPES = click.Choice(["low_stock", "out_of_stock", "overstock"])


@click.command("set")
@sku_options
@click.option("--type", "alert_type", required=True, type=_ALERT_TYPES, help="Alert type.")
@click.option("--threshold", type=int, default=0, help="Threshold quantity (ignored for out_of_stock).")
def alert_set(product, variant, warehouse, alert_type, threshold) -> None:
    """Configure an alert rule for a SKU."""
    ledger = build_ledger()
    handler = ConfigureAlertHandler(ledger.alerts, ledger.runner)

    try:
        dto = handler.handle(to_sku(product, variant, warehouse), alert_type, threshold)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    state = "ACTIVE" if dto.is_active else "inactive"
    click.echo(f"{dto.alert_type} alert on {dto.sku} at {dto.threshold} ({state})")


@click.command("remove")
@sku_options
@click.option("--type", "alert_type", required=True, type=_ALERT_TYPES, help="Alert type.")
def alert_remove(product, variant, warehouse, alert_type) -> None:
    """Remove an alert rule."""
    handler = RemoveAlertHandler(build_ledger().alerts)

    try:
        handler.handle(to_sku(product, variant, warehouse), alert_type)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{alert_type} alert removed.")


@click.command("list")
@click.option("--active", "active_only", is_flag=True, default=False, help="Only active alerts.")
def alert_list(active_only: bool) -> None:
    """List alert rules."""
    handler = ShowAlertsHandler(build_ledger().alerts)
    alerts = handler.handle(active_only=active_only)

    if not alerts:
        click.echo("No alerts found.")
        return

    click.echo(f"{'SKU':<24} {'Type':<13} {'Threshold':>9}  {'State':<8} Last triggered")
    click.echo("-" * 74)
    for a in alerts:
        state = "ACTIVE" if a.is_active else "-"
        click.echo(
            f"{a.sku:<24} {a.alert_type:<13} {a.threshold:>9}  {state:<8} {a.last_triggered_at or '-'}"
        )
