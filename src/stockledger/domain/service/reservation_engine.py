"""Domain service: Reservation Engine.

Decides whether a requested quantity can be claimed against available stock
and carries each claim through ``held -> committed | released | expired``.

Every operation runs as one ledger unit (see ``LedgerUnitRunner``): the
availability check and the reserved-quantity increment happen under the
triple's lock, so two concurrent requests can never both pass the check
against a stale ``available``.  Requests on the same triple are served in
lock-arrival order, all-or-nothing, with no partial reservations.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable
from uuid import uuid4

import structlog

from stockledger.domain.clock import Clock, utc_now
from stockledger.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStock,
    InvalidArgument,
    RetryableError,
)
from stockledger.domain.model.movement import Movement, MovementType
from stockledger.domain.model.references import Reference
from stockledger.domain.model.reservation import Reservation
from stockledger.domain.model.value_objects import Quantity, StockKey
from stockledger.domain.repository.reservation_repository import (
    ReservationRepository,
)
from stockledger.domain.service.ledger_unit import LedgerUnitRunner
from stockledger.domain.service.movement_log import MovementLog
from stockledger.domain.service.stock_record_store import StockRecordStore

logger = structlog.get_logger(__name__)


def _new_token() -> str:
    return uuid4().hex


class ReservationEngine:

    def __init__(
        self,
        store: StockRecordStore,
        movement_log: MovementLog,
        reservations: ReservationRepository,
        runner: LedgerUnitRunner,
        clock: Clock = utc_now,
        default_ttl: timedelta | None = None,
        token_factory: Callable[[], str] = _new_token,
    ) -> None:
        self._store = store
        self._log = movement_log
        self._reservations = reservations
        self._runner = runner
        self._clock = clock
        self._default_ttl = default_ttl
        self._token_factory = token_factory

    # --- Queries --------------------------------------------------------------

    def get(self, reservation_id: str) -> Reservation:
        reservation = self._reservations.get(reservation_id)
        if reservation is None:
            raise EntityNotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    def for_reference(self, reference: Reference) -> list[Reservation]:
        return self._reservations.for_reference(reference)

    # --- Reserve --------------------------------------------------------------

    def reserve(
        self,
        key: StockKey,
        quantity: int,
        reference: Reference,
        expires_at: datetime | None = None,
    ) -> Reservation:
        """Claim ``quantity`` units of ``key`` for ``reference``.

        Raises InsufficientStock (without touching any state) when fewer
        than ``quantity`` units are available.
        """
        qty = Quantity(quantity)

        def work() -> Reservation:
            record = self._store.get(key)
            if qty.value > record.available:
                raise InsufficientStock(key, qty.value, record.available)
            return self._hold(key, qty, reference, expires_at)

        try:
            return self._runner.run([key], work)
        except InsufficientStock as exc:
            logger.info(
                "reservation_rejected",
                key=str(key),
                requested=exc.requested,
                available=exc.available,
                reference=reference.label,
            )
            raise

    def reserve_lines(
        self,
        lines: Sequence[tuple[StockKey, int]],
        reference: Reference,
        expires_at: datetime | None = None,
    ) -> list[Reservation]:
        """Reserve every line of an order, or nothing at all.

        Uses a two-phase approach under the locks of every triple involved:
          Phase 1 — validate: every triple has enough available stock for
                    the sum of its lines.  Fails before any mutation.
          Phase 2 — mutate: hold one reservation per line.
        """
        if not lines:
            raise InvalidArgument("Must specify at least one line to reserve")

        parsed = [(key, Quantity(qty)) for key, qty in lines]
        requested: dict[StockKey, int] = {}
        for key, qty in parsed:
            requested[key] = requested.get(key, 0) + qty.value

        def work() -> list[Reservation]:
            # Phase 1: validate
            for key, total in requested.items():
                available = self._store.get(key).available
                if total > available:
                    raise InsufficientStock(key, total, available)

            # Phase 2: mutate
            return [self._hold(key, qty, reference, expires_at) for key, qty in parsed]

        try:
            return self._runner.run(list(requested), work)
        except InsufficientStock as exc:
            logger.info(
                "order_reservation_rejected",
                key=str(exc.key),
                requested=exc.requested,
                available=exc.available,
                reference=reference.label,
            )
            raise

    # --- Settle ---------------------------------------------------------------

    def commit(self, reservation_id: str, created_by: str | None = None) -> Movement:
        """Turn a held reservation into an ``out`` movement.

        Raises InvalidState unless the reservation is still held.
        """
        key = self.get(reservation_id).key
        return self._runner.run([key], lambda: self._commit_locked(reservation_id, created_by))

    def release(self, reservation_id: str, reason: str = "cancelled") -> None:
        """Give a held reservation's quantity back to available stock.

        On-hand is unchanged and no movement is written: the stock never
        left the warehouse.
        """
        key = self.get(reservation_id).key
        self._runner.run([key], lambda: self._release_locked(reservation_id, reason))

    def commit_reference(
        self, reference: Reference, created_by: str | None = None
    ) -> list[Movement]:
        """Commit every held reservation made for ``reference`` in one unit."""
        held = [r for r in self._reservations.for_reference(reference) if r.is_held]
        if not held:
            raise EntityNotFoundError(f"No held reservations for {reference.label}")

        def work() -> list[Movement]:
            return [
                self._commit_locked(r.id, created_by)
                for r in held
                if self.get(r.id).is_held
            ]

        return self._runner.run([r.key for r in held], work)

    def release_reference(self, reference: Reference, reason: str = "cancelled") -> int:
        """Release every held reservation made for ``reference``; return how many."""
        held = [r for r in self._reservations.for_reference(reference) if r.is_held]
        if not held:
            return 0

        def work() -> int:
            released = 0
            for r in held:
                if self.get(r.id).is_held:
                    self._release_locked(r.id, reason)
                    released += 1
            return released

        return self._runner.run([r.key for r in held], work)

    # --- Expiry ---------------------------------------------------------------

    def expire_stale(self, now: datetime | None = None) -> int:
        """Expire held reservations whose ``expires_at`` has passed.

        Each reservation is re-checked under its triple's lock, so a sweep
        racing a caller's commit/release (or a second sweep) never releases
        the same quantity twice.
        """
        now = now or self._clock()
        expired = 0
        for candidate in self._reservations.held_expiring_by(now):

            def work(reservation_id: str = candidate.id) -> bool:
                current = self.get(reservation_id)
                if not current.is_held or not current.is_expired_at(now):
                    return False
                current.expire(now)
                self._store.apply_delta(current.key, 0, -current.quantity.value)
                self._reservations.save(current)
                return True

            try:
                done = self._runner.run([candidate.key], work)
            except RetryableError as exc:
                # Left held; the next sweep picks it up again.
                logger.warning(
                    "reservation_expiry_skipped",
                    reservation_id=candidate.id,
                    key=str(candidate.key),
                    error=type(exc).__name__,
                    detail=str(exc),
                )
                continue
            if done:
                expired += 1
                logger.info(
                    "reservation_expired",
                    reservation_id=candidate.id,
                    key=str(candidate.key),
                    quantity=candidate.quantity.value,
                )
        return expired

    # --- Internal helpers (caller holds the triple lock) ----------------------

    def _hold(
        self,
        key: StockKey,
        qty: Quantity,
        reference: Reference,
        expires_at: datetime | None,
    ) -> Reservation:
        now = self._clock()
        if expires_at is None and self._default_ttl is not None:
            expires_at = now + self._default_ttl

        self._store.apply_delta(key, 0, qty.value)
        reservation = Reservation(
            id=self._token_factory(),
            key=key,
            quantity=qty,
            reference=reference,
            created_at=now,
            expires_at=expires_at,
        )
        self._reservations.save(reservation)
        logger.info(
            "reservation_held",
            reservation_id=reservation.id,
            key=str(key),
            quantity=qty.value,
            reference=reference.label,
            expires_at=expires_at.isoformat() if expires_at else None,
        )
        return reservation

    def _commit_locked(self, reservation_id: str, created_by: str | None) -> Movement:
        reservation = self.get(reservation_id)
        now = self._clock()
        reservation.commit(now)

        qty = reservation.quantity.value
        record = self._store.get(reservation.key)
        movement = Movement(
            key=reservation.key,
            type=MovementType.OUT,
            quantity_delta=-qty,
            quantity_before=record.on_hand,
            quantity_after=record.on_hand - qty,
            reference=reservation.reference,
            unit_cost=record.average_cost,
            created_by=created_by,
            notes=f"Reservation {reservation.id} committed",
            created_at=now,
        )
        movement_id = self._log.append(movement, reserved_delta=-qty)
        self._reservations.save(reservation)
        logger.info(
            "reservation_committed",
            reservation_id=reservation.id,
            key=str(reservation.key),
            quantity=qty,
            movement_id=movement_id,
        )
        return replace(movement, id=movement_id)

    def _release_locked(self, reservation_id: str, reason: str) -> None:
        reservation = self.get(reservation_id)
        reservation.release(reason, self._clock())
        self._store.apply_delta(reservation.key, 0, -reservation.quantity.value)
        self._reservations.save(reservation)
        logger.info(
            "reservation_released",
            reservation_id=reservation.id,
            key=str(reservation.key),
            quantity=reservation.quantity.value,
            reason=reason,
        )
