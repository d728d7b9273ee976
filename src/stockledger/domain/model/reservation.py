"""Reservation — a pending claim on stock for one order line.

State machine::

    HELD -> COMMITTED   (fulfillment proceeds, stock leaves the warehouse)
    HELD -> RELEASED    (cancellation)
    HELD -> EXPIRED     (background sweep past ``expires_at``)

The three outcomes are terminal.  Quantity bookkeeping on the StockRecord is
done by the reservation engine; this aggregate only guards the transitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from stockledger.domain.exceptions import InvalidState
from stockledger.domain.model.references import Reference
from stockledger.domain.model.value_objects import Quantity, StockKey


class ReservationStatus(Enum):
    HELD = "held"
    COMMITTED = "committed"
    RELEASED = "released"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self is not ReservationStatus.HELD


@dataclass
class Reservation:
    id: str
    key: StockKey
    quantity: Quantity
    reference: Reference
    status: ReservationStatus = ReservationStatus.HELD
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime | None = None
    settled_at: datetime | None = None
    release_reason: str | None = None

    @property
    def is_held(self) -> bool:
        return self.status is ReservationStatus.HELD

    def is_expired_at(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    # --- State transitions ----------------------------------------------------

    def commit(self, at: datetime) -> None:
        self._leave_held(ReservationStatus.COMMITTED, at)

    def release(self, reason: str, at: datetime) -> None:
        self._leave_held(ReservationStatus.RELEASED, at)
        self.release_reason = reason

    def expire(self, at: datetime) -> None:
        self._leave_held(ReservationStatus.EXPIRED, at)
        self.release_reason = "expired"

    # --- Internal helpers -----------------------------------------------------

    def _leave_held(self, target: ReservationStatus, at: datetime) -> None:
        if self.status is not ReservationStatus.HELD:
            raise InvalidState(
                f"Cannot move reservation {self.id} to {target.value} "
                f"— current status is {self.status.value}, expected held"
            )
        self.status = target
        self.settled_at = at
