"""Movement — one immutable change to on-hand quantity.

Movements form an append-only ledger.  Corrections are new offsetting
movements, never edits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from stockledger.domain.exceptions import InvalidArgument, ValidationError
from stockledger.domain.model.references import Reference
from stockledger.domain.model.value_objects import StockKey


class MovementType(Enum):
    IN = "in"
    OUT = "out"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    MovementType.IN: "Stock In",
    MovementType.OUT: "Stock Out",
    MovementType.ADJUSTMENT: "Adjustment",
    MovementType.TRANSFER: "Transfer",
}


@dataclass(frozen=True)
class Movement:
    key: StockKey
    type: MovementType
    quantity_delta: int
    quantity_before: int
    quantity_after: int
    reference: Reference
    unit_cost: Decimal | None = None
    created_by: str | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: int | None = None  # assigned by the movement log on append

    def __post_init__(self) -> None:
        if self.quantity_delta == 0:
            raise InvalidArgument("Movement quantity cannot be zero")
        if self.quantity_after != self.quantity_before + self.quantity_delta:
            raise ValidationError(
                f"Movement arithmetic mismatch for {self.key}: "
                f"{self.quantity_before} + {self.quantity_delta} != {self.quantity_after}"
            )
        if self.type is MovementType.IN and self.quantity_delta < 0:
            raise ValidationError("Stock-in movements must be positive")
        if self.type is MovementType.OUT and self.quantity_delta > 0:
            raise ValidationError("Stock-out movements must be negative")

    @property
    def is_incoming(self) -> bool:
        return self.quantity_delta > 0

    @property
    def is_outgoing(self) -> bool:
        return self.quantity_delta < 0

    @property
    def absolute_quantity(self) -> int:
        return abs(self.quantity_delta)

    @property
    def total_value(self) -> Decimal:
        return self.absolute_quantity * (self.unit_cost or Decimal("0.00"))

    @property
    def display_quantity(self) -> str:
        prefix = "+" if self.quantity_delta >= 0 else ""
        return f"{prefix}{self.quantity_delta:,}"
