"""Application service: reserve stock for an order line or a whole order."""

from __future__ import annotations

from stockledger.application.dto import (
    ReservationDTO,
    ReservationLineSpec,
    SkuSpec,
    reservation_dto,
)
from stockledger.domain.model.references import OrderReference, parse_reference
from stockledger.domain.service.reservation_engine import ReservationEngine


class ReserveStockHandler:

    def __init__(self, engine: ReservationEngine) -> None:
        self._engine = engine

    def handle(self, sku: SkuSpec, quantity: int, reference: str) -> ReservationDTO:
        """Reserve a single line; ``reference`` is in ``kind:id`` form."""
        reservation = self._engine.reserve(sku.to_key(), quantity, parse_reference(reference))
        return reservation_dto(reservation)


class ReserveOrderHandler:

    def __init__(self, engine: ReservationEngine) -> None:
        self._engine = engine

    def handle(self, order_id: str, lines: list[ReservationLineSpec]) -> list[ReservationDTO]:
        """Reserve every line of an order, all-or-nothing."""
        reservations = self._engine.reserve_lines(
            [(line.sku.to_key(), line.quantity) for line in lines],
            OrderReference(order_id),
        )
        return [reservation_dto(r) for r in reservations]
