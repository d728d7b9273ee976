"""CLI commands for reservations."""

from __future__ import annotations

import click

from stockledger.application.dto import ReservationDTO
from stockledger.application.expire_reservations import ExpireReservationsHandler
from stockledger.application.reserve_stock import ReserveOrderHandler, ReserveStockHandler
from stockledger.application.settle_reservation import (
    CommitReservationHandler,
    ReleaseReservationHandler,
)
from stockledger.application.show_stock import ShowReservationsHandler
from stockledger.domain.exceptions import DomainException
from stockledger.infrastructure.bootstrap import build_ledger, reservation_sweeper
from stockledger.infrastructure.cli.common import parse_lines, sku_options, to_sku


def _echo_reservation(dto: ReservationDTO) -> None:
    expires = f"  expires {dto.expires_at}" if dto.expires_at else ""
    click.echo(
        f"Reservation {dto.id}  {dto.sku:<24} qty={dto.quantity:<5} "
        f"status={dto.status:<9} {dto.reference}{expires}"
    )


@click.command("reserve")
@sku_options
@click.option("--quantity", required=True, type=int, help="Units to reserve.")
@click.option("--reference", required=True, help="What the stock is for, e.g. 'order:42'.")
def reservation_reserve(product, variant, warehouse, quantity, reference) -> None:
    """Reserve stock for one order line."""
    handler = ReserveStockHandler(build_ledger().reservations)

    try:
        dto = handler.handle(to_sku(product, variant, warehouse), quantity, reference)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _echo_reservation(dto)


@click.command("reserve-order")
@click.option("--order", "order_id", required=True, help="Order ID.")
@click.option("--lines", required=True, help="Lines as 'Product[/Variant]@Warehouse:Qty,...'.")
def reservation_reserve_order(order_id: str, lines: str) -> None:
    """Reserve every line of an order, all-or-nothing."""
    specs = parse_lines(lines)
    handler = ReserveOrderHandler(build_ledger().reservations)

    try:
        dtos = handler.handle(order_id, specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for dto in dtos:
        _echo_reservation(dto)


@click.command("commit")
@click.option("--id", "reservation_id", default=None, help="Reservation token.")
@click.option("--order", "order_id", default=None, help="Commit every held line of an order.")
@click.option("--by", "created_by", default=None, help="Who shipped the stock.")
def reservation_commit(reservation_id: str | None, order_id: str | None, created_by: str | None) -> None:
    """Commit reservations (stock leaves the warehouse)."""
    if (reservation_id is None) == (order_id is None):
        raise click.UsageError("Give exactly one of --id or --order.")

    handler = CommitReservationHandler(build_ledger().reservations)

    try:
        if reservation_id is not None:
            movements = [handler.handle(reservation_id, created_by=created_by)]
        else:
            movements = handler.handle_order(order_id, created_by=created_by)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for m in movements:
        click.echo(f"Committed: {m.sku} {m.quantity} ({m.before} -> {m.after})  movement #{m.id}")


@click.command("release")
@click.option("--id", "reservation_id", default=None, help="Reservation token.")
@click.option("--order", "order_id", default=None, help="Release every held line of an order.")
@click.option("--reason", default="cancelled", show_default=True, help="Why the stock is released.")
def reservation_release(reservation_id: str | None, order_id: str | None, reason: str) -> None:
    """Release reservations back to available stock."""
    if (reservation_id is None) == (order_id is None):
        raise click.UsageError("Give exactly one of --id or --order.")

    handler = ReleaseReservationHandler(build_ledger().reservations)

    try:
        if reservation_id is not None:
            handler.handle(reservation_id, reason)
            click.echo(f"Reservation {reservation_id} released.")
        else:
            released = handler.handle_order(order_id, reason)
            click.echo(f"Released {released} reservation(s) for order #{order_id}.")
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("show")
@click.option("--id", "reservation_id", default=None, help="Reservation token.")
@click.option("--reference", default=None, help="All reservations for a reference, e.g. 'order:42'.")
def reservation_show(reservation_id: str | None, reference: str | None) -> None:
    """Show reservations."""
    if (reservation_id is None) == (reference is None):
        raise click.UsageError("Give exactly one of --id or --reference.")

    handler = ShowReservationsHandler(build_ledger().reservations)

    try:
        if reservation_id is not None:
            dtos = [handler.handle(reservation_id)]
        else:
            dtos = handler.handle_reference(reference)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dtos:
        click.echo("No reservations found.")
    for dto in dtos:
        _echo_reservation(dto)


@click.command("expire")
def reservation_expire() -> None:
    """Expire stale reservations once."""
    handler = ExpireReservationsHandler(build_ledger().reservations)

    try:
        expired = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Expired {expired} reservation(s).")


@click.command("sweep")
@click.option("--interval", type=float, default=None, help="Seconds between sweeps.")
def reservation_sweep(interval: float | None) -> None:
    """Expire stale reservations on a fixed interval until interrupted."""
    sweeper = reservation_sweeper(build_ledger(), interval)
    try:
        sweeper.run_forever()
    except KeyboardInterrupt:
        sweeper.stop()
        click.echo("Sweeper stopped.")
