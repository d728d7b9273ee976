import click

from stockledger.infrastructure.cli.alert_commands import alert_list, alert_remove, alert_set
from stockledger.infrastructure.cli.reservation_commands import (
    reservation_commit,
    reservation_expire,
    reservation_release,
    reservation_reserve,
    reservation_reserve_order,
    reservation_show,
    reservation_sweep,
)
from stockledger.infrastructure.cli.stock_commands import (
    stock_adjust,
    stock_count,
    stock_history,
    stock_receive,
    stock_show,
    stock_transfer,
    stock_valuation,
)
from stockledger.infrastructure.logging import add_context, clear_context, configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL for this run.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Stock Ledger — per-warehouse stock, reservations and alerts"""
    configure_logging(log_level.upper() if log_level else None)
    # Every event of this run carries the command group it came from.
    clear_context()
    add_context(command=ctx.invoked_subcommand)


@cli.group()
def stock() -> None:
    """Manage stock levels and movements."""


@cli.group()
def reservation() -> None:
    """Manage stock reservations."""


@cli.group()
def alert() -> None:
    """Manage stock alert rules."""


# Register subcommands
stock.add_command(stock_adjust)
stock.add_command(stock_count)
stock.add_command(stock_history)
stock.add_command(stock_receive)
stock.add_command(stock_show)
stock.add_command(stock_transfer)
stock.add_command(stock_valuation)
reservation.add_command(reservation_commit)
reservation.add_command(reservation_expire)
reservation.add_command(reservation_release)
reservation.add_command(reservation_reserve)
reservation.add_command(reservation_reserve_order)
reservation.add_command(reservation_show)
reservation.add_command(reservation_sweep)
alert.add_command(alert_list)
alert.add_command(alert_remove)
alert.add_command(alert_set)
