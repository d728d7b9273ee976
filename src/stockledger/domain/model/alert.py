"""StockAlert — derived threshold state for one triple.

An alert rule is configured per (triple, alert type).  Its ``is_active``
flag is recomputed after every mutation of the triple and is never
authoritative on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from stockledger.domain.exceptions import InvalidArgument
from stockledger.domain.model.value_objects import StockKey


class AlertType(Enum):
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    OVERSTOCK = "overstock"


@dataclass
class StockAlert:
    key: StockKey
    alert_type: AlertType
    threshold: int
    is_active: bool = False
    last_triggered_at: datetime | None = None
    last_resolved_at: datetime | None = None

    def __post_init__(self) -> None:
        self.set_threshold(self.threshold)

    def set_threshold(self, threshold: int) -> None:
        """Out-of-stock rules always fire at zero, whatever was asked for."""
        if self.alert_type is AlertType.OUT_OF_STOCK:
            threshold = 0
        if threshold < 0:
            raise InvalidArgument("Alert threshold cannot be negative")
        self.threshold = threshold

    def breached_by(self, available: int) -> bool:
        if self.alert_type is AlertType.OVERSTOCK:
            return available >= self.threshold
        return available <= self.threshold

    def evaluate(self, available: int, at: datetime) -> bool:
        """Toggle the alert against ``available``; return True if it changed."""
        breached = self.breached_by(available)
        if breached and not self.is_active:
            self.is_active = True
            self.last_triggered_at = at
            return True
        if not breached and self.is_active:
            self.is_active = False
            self.last_resolved_at = at
            return True
        return False
