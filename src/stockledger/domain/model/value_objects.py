"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from stockledger.domain.exceptions import InvalidArgument

COST_PLACES = Decimal("0.01")
ZERO_COST = Decimal("0.00")


@dataclass(frozen=True)
class StockKey:
    """The (product, variant, warehouse) triple identifying one stock record."""

    product_id: str
    variant_id: str | None
    warehouse_id: str

    def __post_init__(self) -> None:
        if not self.product_id:
            raise InvalidArgument("Product ID is required")
        if not self.warehouse_id:
            raise InvalidArgument("Warehouse ID is required")
        if self.variant_id == "":
            object.__setattr__(self, "variant_id", None)

    @property
    def sort_key(self) -> tuple[str, str, str]:
        """Total order used to acquire several triple locks without deadlock."""
        return (self.product_id, self.variant_id or "", self.warehouse_id)

    def in_warehouse(self, warehouse_id: str) -> StockKey:
        return StockKey(self.product_id, self.variant_id, warehouse_id)

    def __str__(self) -> str:
        sku = self.product_id
        if self.variant_id is not None:
            sku = f"{sku}/{self.variant_id}"
        return f"{sku}@{self.warehouse_id}"


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot reserve, receive or move zero or
    negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidArgument(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise InvalidArgument("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


def cost_of(amount: str | float | int | Decimal | None) -> Decimal | None:
    """Coerce a unit cost to a two-place Decimal (None passes through)."""
    if amount is None:
        return None
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidArgument(f"Invalid cost amount: {amount!r}") from exc
    if not value.is_finite() or value < 0:
        raise InvalidArgument(f"Cost cannot be negative, got {amount!r}")
    return value.quantize(COST_PLACES, rounding=ROUND_HALF_UP)


def weighted_average_cost(
    on_hand: int,
    average_cost: Decimal,
    incoming: int,
    incoming_cost: Decimal | None,
) -> Decimal:
    """Blend incoming stock into the running average cost.

    Incoming units without a cost keep the current average.  A record with
    no usable stock on hand simply takes the incoming cost.
    """
    if incoming_cost is None:
        return average_cost
    if on_hand <= 0:
        return incoming_cost
    total = average_cost * on_hand + incoming_cost * incoming
    return (total / (on_hand + incoming)).quantize(COST_PLACES, rounding=ROUND_HALF_UP)
