"""Shared click options and parsers for the CLI commands."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import click

from stockledger.application.dto import ReservationLineSpec, SkuSpec


def sku_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add --product / --variant / --warehouse options, collapsed into ``sku``."""
    func = click.option("--warehouse", required=True, help="Warehouse ID.")(func)
    func = click.option("--variant", default=None, help="Variant ID (omit for none).")(func)
    func = click.option("--product", required=True, help="Product ID.")(func)
    return func


def to_sku(product: str, variant: str | None, warehouse: str) -> SkuSpec:
    return SkuSpec(product_id=product, variant_id=variant, warehouse_id=warehouse)


def parse_lines(raw: str) -> list[ReservationLineSpec]:
    """Parse 'P1@W1:3,P2/RED@W1:5' into ReservationLineSpec list."""
    specs: list[ReservationLineSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair or "@" not in pair:
            raise click.BadParameter(
                f"Invalid line format '{pair}'. Expected 'Product[/Variant]@Warehouse:Quantity'."
            )
        sku_text, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(f"Invalid quantity '{qty_str}' for '{sku_text}'.")
        product, warehouse = sku_text.rsplit("@", 1)
        product, _, variant = product.partition("/")
        specs.append(
            ReservationLineSpec(
                sku=to_sku(product.strip(), variant.strip() or None, warehouse.strip()),
                quantity=qty,
            )
        )
    return specs


def parse_since(raw: str | None) -> datetime | None:
    """Parse an ISO date/time; naive values are taken as UTC."""
    if raw is None:
        return None
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        raise click.BadParameter(f"Invalid date '{raw}'. Expected ISO format, e.g. 2024-05-01.")
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
