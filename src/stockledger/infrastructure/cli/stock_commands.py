"""CLI commands for stock levels and movements."""

from __future__ import annotations

import click

from stockledger.application.adjust_stock import AdjustStockHandler, CountStockHandler
from stockledger.application.dto import MovementDTO
from stockledger.application.receive_stock import ReceiveStockHandler
from stockledger.application.show_stock import (
    ShowHistoryHandler,
    ShowStockHandler,
    ShowValuationHandler,
)
from stockledger.application.transfer_stock import TransferStockHandler
from stockledger.domain.exceptions import DomainException
from stockledger.infrastructure.bootstrap import build_ledger
from stockledger.infrastructure.cli.common import parse_since, sku_options, to_sku


def _echo_movement(dto: MovementDTO) -> None:
    click.echo(
        f"Movement #{dto.id}  {dto.type:<10} {dto.sku:<24} {dto.quantity:>8}  "
        f"({dto.before} -> {dto.after})  {dto.reference}"
    )


@click.command("receive")
@sku_options
@click.option("--quantity", required=True, type=int, help="Units received.")
@click.option("--purchase", "purchase_id", required=True, help="Purchase/delivery reference.")
@click.option("--unit-cost", default=None, help="Cost per unit (e.g. 12.50).")
@click.option("--by", "created_by", default=None, help="Who booked the receipt.")
@click.option("--notes", default=None, help="Free-text note.")
def stock_receive(product, variant, warehouse, quantity, purchase_id, unit_cost, created_by, notes) -> None:
    """Receive stock into a warehouse."""
    handler = ReceiveStockHandler(build_ledger().movements)

    try:
        dto = handler.handle(
            to_sku(product, variant, warehouse),
            quantity,
            purchase_id,
            unit_cost=unit_cost,
            created_by=created_by,
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_movement(dto)


@click.command("adjust")
@sku_options
@click.option("--delta", required=True, type=int, help="Signed change to on-hand (e.g. -3).")
@click.option("--reason", required=True, help="Why the stock is being corrected.")
@click.option("--adjustment", "adjustment_id", default=None, help="Adjustment reference.")
@click.option("--by", "created_by", default=None, help="Who made the adjustment.")
def stock_adjust(product, variant, warehouse, delta, reason, adjustment_id, created_by) -> None:
    """Manually correct on-hand stock."""
    handler = AdjustStockHandler(build_ledger().movements)

    try:
        dto = handler.handle(
            to_sku(product, variant, warehouse),
            delta,
            reason,
            adjustment_id=adjustment_id,
            created_by=created_by,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_movement(dto)


@click.command("count")
@sku_options
@click.option("--counted", required=True, type=int, help="Physically counted quantity.")
@click.option("--adjustment", "adjustment_id", default=None, help="Adjustment reference.")
@click.option("--by", "created_by", default=None, help="Who did the count.")
def stock_count(product, variant, warehouse, counted, adjustment_id, created_by) -> None:
    """Set on-hand stock to a counted quantity."""
    handler = CountStockHandler(build_ledger().movements)

    try:
        dto = handler.handle(
            to_sku(product, variant, warehouse),
            counted,
            adjustment_id=adjustment_id,
            created_by=created_by,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto is None:
        click.echo("Count matches on-hand, no adjustment needed.")
    else:
        _echo_movement(dto)


@click.command("transfer")
@sku_options
@click.option("--to", "to_warehouse", required=True, help="Destination warehouse ID.")
@click.option("--quantity", required=True, type=int, help="Units to move.")
@click.option("--transfer", "transfer_id", default=None, help="Transfer reference.")
@click.option("--by", "created_by", default=None, help="Who made the transfer.")
def stock_transfer(product, variant, warehouse, to_warehouse, quantity, transfer_id, created_by) -> None:
    """Move available stock to another warehouse."""
    handler = TransferStockHandler(build_ledger().movements)

    try:
        outgoing, incoming = handler.handle(
            to_sku(product, variant, warehouse),
            to_warehouse,
            quantity,
            transfer_id=transfer_id,
            created_by=created_by,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_movement(outgoing)
    _echo_movement(incoming)


@click.command("show")
@click.option("--warehouse", default=None, help="Only this warehouse.")
@click.option("--product", default=None, help="Only this product.")
def stock_show(warehouse: str | None, product: str | None) -> None:
    """Show current stock levels."""
    handler = ShowStockHandler(build_ledger().store)
    lines = handler.handle(warehouse_id=warehouse, product_id=product)

    if not lines:
        click.echo("No stock records found.")
        return

    click.echo(f"{'SKU':<24} {'On hand':>8} {'Reserved':>10} {'Available':>10} {'Avg cost':>10}")
    click.echo("-" * 66)
    for line in lines:
        click.echo(
            f"{line.sku:<24} {line.on_hand:>8} {line.reserved:>10} "
            f"{line.available:>10} {line.average_cost:>10}"
        )


@click.command("history")
@click.option("--product", default=None, help="Product ID.")
@click.option("--variant", default=None, help="Variant ID.")
@click.option("--warehouse", default=None, help="Warehouse ID.")
@click.option("--since", default=None, help="Only movements at or after this ISO date/time.")
@click.option("--reference", default=None, help="Movements for a reference, e.g. 'order:42'.")
def stock_history(product, variant, warehouse, since, reference) -> None:
    """Show the movement log for a SKU or a reference."""
    handler = ShowHistoryHandler(build_ledger().movement_log)

    try:
        if reference is not None:
            movements = handler.handle_reference(reference)
        elif product and warehouse:
            movements = handler.handle(to_sku(product, variant, warehouse), parse_since(since))
        else:
            raise click.UsageError("Give --product and --warehouse, or --reference.")
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not movements:
        click.echo("No movements found.")
        return

    click.echo(f"{'#':>5} {'When':<21} {'Type':<11} {'Qty':>7} {'Before':>7} {'After':>7}  Reference")
    click.echo("-" * 80)
    for m in movements:
        click.echo(
            f"{m.id:>5} {m.created_at:<21} {m.type:<11} {m.quantity:>7} "
            f"{m.before:>7} {m.after:>7}  {m.reference}"
        )


@click.command("valuation")
@click.option("--warehouse", default=None, help="Only this warehouse.")
def stock_valuation(warehouse: str | None) -> None:
    """Show the value of on-hand stock at average cost."""
    handler = ShowValuationHandler(build_ledger().movements)
    total = handler.handle(warehouse)
    scope = f"warehouse {warehouse}" if warehouse else "all warehouses"
    click.echo(f"Stock value ({scope}): {total:.2f}")
