"""Movement Log — the append-only audit trail of on-hand changes.

A movement is only recorded once the store has accepted the matching delta.
``append`` checks ``quantity_before`` against what the store holds, applies
the delta (version compare-and-swap) and then writes the movement, so a lost
update that makes the caller retry leaves nothing behind in the log.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

import structlog

from stockledger.domain.exceptions import InconsistentLedger
from stockledger.domain.model.movement import Movement
from stockledger.domain.model.references import Reference
from stockledger.domain.model.stock_record import StockRecord
from stockledger.domain.model.value_objects import StockKey
from stockledger.domain.repository.movement_repository import MovementRepository
from stockledger.domain.service.stock_record_store import StockRecordStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Posting:
    """One movement plus the store change that goes with it."""

    movement: Movement
    reserved_delta: int = 0
    average_cost: Decimal | None = None


class MovementLog:

    def __init__(self, repo: MovementRepository, store: StockRecordStore) -> None:
        self._repo = repo
        self._store = store

    def append(
        self,
        movement: Movement,
        reserved_delta: int = 0,
        average_cost: Decimal | None = None,
    ) -> int:
        """Apply ``movement`` to the store and record it; return its id."""
        (movement_id,) = self.post([Posting(movement, reserved_delta, average_cost)])
        return movement_id

    def post(self, postings: Sequence[Posting]) -> list[int]:
        """Apply several movements as one change, e.g. both legs of a transfer.

        Every stock record is saved before any movement is written.  If a
        later save fails, the records already saved are put back.
        """
        for posting in postings:
            self._check_before(posting.movement)

        applied: list[tuple[StockRecord, StockRecord]] = []
        try:
            for posting in postings:
                m = posting.movement
                original = self._store.get(m.key)
                updated = self._store.apply_delta(
                    m.key,
                    m.quantity_delta,
                    posting.reserved_delta,
                    average_cost=posting.average_cost,
                )
                applied.append((original, updated))
        except Exception:
            for original, updated in reversed(applied):
                self._store.restore(original, updated)
            raise

        return [self._record(p.movement) for p in postings]

    def history(self, key: StockKey, since: datetime | None = None) -> list[Movement]:
        return self._repo.for_key(key, since)

    def by_reference(self, reference: Reference) -> list[Movement]:
        return self._repo.for_reference(reference)

    # --- Internal helpers -----------------------------------------------------

    def _check_before(self, movement: Movement) -> None:
        # Arithmetic is already enforced by Movement itself.
        current = self._store.get(movement.key).on_hand
        if movement.quantity_before != current:
            raise InconsistentLedger(
                f"Movement for {movement.key} expected on-hand {movement.quantity_before}, "
                f"store holds {current}"
            )

    def _record(self, movement: Movement) -> int:
        stored = self._repo.append(movement)
        logger.info(
            "movement_appended",
            movement_id=stored.id,
            key=str(stored.key),
            type=stored.type.value,
            delta=stored.quantity_delta,
            before=stored.quantity_before,
            after=stored.quantity_after,
            reference=stored.reference.label,
        )
        return stored.id  # type: ignore[return-value]
