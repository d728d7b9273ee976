"""Stock Record Store — current on-hand and reserved quantity per triple.

Callers must hold the triple's lock around ``apply_delta``; the store itself
only guarantees that a lost update by another writer is detected (via the
repository's version check) rather than silently overwritten.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import structlog

from stockledger.domain.clock import Clock, utc_now
from stockledger.domain.exceptions import InvariantViolation
from stockledger.domain.model.stock_record import StockRecord
from stockledger.domain.model.value_objects import StockKey
from stockledger.domain.repository.stock_record_repository import (
    StockRecordRepository,
)

logger = structlog.get_logger(__name__)


class StockRecordStore:

    def __init__(self, repo: StockRecordRepository, clock: Clock = utc_now) -> None:
        self._repo = repo
        self._clock = clock

    def get(self, key: StockKey) -> StockRecord:
        """Return the record for ``key``; a zero-valued one if it was never created."""
        record = self._repo.get(key)
        return record if record is not None else StockRecord.empty(key)

    def list_records(
        self,
        warehouse_id: str | None = None,
        product_id: str | None = None,
    ) -> list[StockRecord]:
        records = [
            r
            for r in self._repo.list_all()
            if (warehouse_id is None or r.key.warehouse_id == warehouse_id)
            and (product_id is None or r.key.product_id == product_id)
        ]
        return sorted(records, key=lambda r: r.key.sort_key)

    def apply_delta(
        self,
        key: StockKey,
        on_hand_delta: int,
        reserved_delta: int,
        average_cost: Decimal | None = None,
    ) -> StockRecord:
        """Apply signed deltas to a triple and persist the result."""
        record = self.get(key)
        expected_version = record.version
        try:
            record.apply(on_hand_delta, reserved_delta, self._clock(), average_cost)
        except InvariantViolation:
            logger.error(
                "stock_invariant_violated",
                key=str(key),
                on_hand=record.on_hand,
                reserved=record.reserved,
                on_hand_delta=on_hand_delta,
                reserved_delta=reserved_delta,
                version=expected_version,
            )
            raise
        self._repo.save(record, expected_version=expected_version)
        return record

    def restore(self, original: StockRecord, applied: StockRecord) -> None:
        """Put ``original``'s quantities back over a just-saved ``applied`` record."""
        reverted = replace(original, version=applied.version)
        self._repo.save(reverted, expected_version=applied.version)
        logger.warning(
            "stock_record_restored",
            key=str(original.key),
            on_hand=reverted.on_hand,
            reserved=reverted.reserved,
        )
