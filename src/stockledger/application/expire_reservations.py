"""Application service: expire stale reservations (one sweep)."""

from __future__ import annotations

from stockledger.domain.service.reservation_engine import ReservationEngine


class ExpireReservationsHandler:

    def __init__(self, engine: ReservationEngine) -> None:
        self._engine = engine

    def handle(self) -> int:
        return self._engine.expire_stale()
