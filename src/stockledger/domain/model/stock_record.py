"""StockRecord aggregate — on-hand and reserved quantity for one triple.

Each (product, variant, warehouse) triple has at most one StockRecord.  It is
created on the first movement into the warehouse, never deleted (only zeroed)
and mutated exclusively through ``apply``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from stockledger.domain.exceptions import InvariantViolation
from stockledger.domain.model.value_objects import ZERO_COST, StockKey


@dataclass
class StockRecord:
    """Aggregate root for stock tracking.

    Invariants:
    - ``on_hand`` and ``reserved`` are never negative
    - ``reserved`` can never exceed ``on_hand``
    - ``available`` is therefore always >= 0

    ``version`` is bumped by the repository on every successful save and is
    used to detect lost updates.  A version of 0 means "never persisted".
    """

    key: StockKey
    on_hand: int = 0
    reserved: int = 0
    average_cost: Decimal = ZERO_COST
    last_movement_at: datetime | None = None
    version: int = 0

    @staticmethod
    def empty(key: StockKey) -> StockRecord:
        return StockRecord(key=key)

    @property
    def available(self) -> int:
        return self.on_hand - self.reserved

    @property
    def exists(self) -> bool:
        return self.version > 0

    @property
    def stock_value(self) -> Decimal:
        return self.average_cost * self.on_hand

    def apply(
        self,
        on_hand_delta: int,
        reserved_delta: int,
        at: datetime,
        average_cost: Decimal | None = None,
    ) -> None:
        """Apply signed deltas, refusing any result that breaks an invariant."""
        new_on_hand = self.on_hand + on_hand_delta
        new_reserved = self.reserved + reserved_delta

        if new_on_hand < 0:
            raise InvariantViolation(
                f"On-hand for {self.key} would become {new_on_hand} "
                f"(on_hand={self.on_hand}, delta={on_hand_delta})"
            )
        if new_reserved < 0:
            raise InvariantViolation(
                f"Reserved for {self.key} would become {new_reserved} "
                f"(reserved={self.reserved}, delta={reserved_delta})"
            )
        if new_reserved > new_on_hand:
            raise InvariantViolation(
                f"Reserved for {self.key} would exceed on-hand "
                f"({new_reserved} > {new_on_hand})"
            )

        self.on_hand = new_on_hand
        self.reserved = new_reserved
        if average_cost is not None:
            self.average_cost = average_cost
        if on_hand_delta != 0:
            self.last_movement_at = at
