"""Application service: commit or release reservations.

Orders are settled as a whole through their ``order:<id>`` reference;
single reservations through their token.
"""

from __future__ import annotations

from stockledger.application.dto import MovementDTO, movement_dto
from stockledger.domain.model.references import OrderReference
from stockledger.domain.service.reservation_engine import ReservationEngine


class CommitReservationHandler:

    def __init__(self, engine: ReservationEngine) -> None:
        self._engine = engine

    def handle(self, reservation_id: str, created_by: str | None = None) -> MovementDTO:
        return movement_dto(self._engine.commit(reservation_id, created_by=created_by))

    def handle_order(self, order_id: str, created_by: str | None = None) -> list[MovementDTO]:
        movements = self._engine.commit_reference(OrderReference(order_id), created_by=created_by)
        return [movement_dto(m) for m in movements]


class ReleaseReservationHandler:

    def __init__(self, engine: ReservationEngine) -> None:
        self._engine = engine

    def handle(self, reservation_id: str, reason: str = "cancelled") -> None:
        self._engine.release(reservation_id, reason)

    def handle_order(self, order_id: str, reason: str = "cancelled") -> int:
        return self._engine.release_reference(OrderReference(order_id), reason)
