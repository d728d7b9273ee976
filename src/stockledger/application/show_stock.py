"""Application services: stock, movement history and reservation queries."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from stockledger.application.dto import (
    MovementDTO,
    ReservationDTO,
    SkuSpec,
    StockLineDTO,
    movement_dto,
    reservation_dto,
    stock_line,
)
from stockledger.domain.model.references import parse_reference
from stockledger.domain.service.movement_log import MovementLog
from stockledger.domain.service.reservation_engine import ReservationEngine
from stockledger.domain.service.stock_movement_service import StockMovementService
from stockledger.domain.service.stock_record_store import StockRecordStore


class ShowStockHandler:

    def __init__(self, store: StockRecordStore) -> None:
        self._store = store

    def handle(
        self,
        warehouse_id: str | None = None,
        product_id: str | None = None,
    ) -> list[StockLineDTO]:
        records = self._store.list_records(warehouse_id=warehouse_id, product_id=product_id)
        return [stock_line(r) for r in records]


class ShowHistoryHandler:

    def __init__(self, movement_log: MovementLog) -> None:
        self._movement_log = movement_log

    def handle(self, sku: SkuSpec, since: datetime | None = None) -> list[MovementDTO]:
        return [movement_dto(m) for m in self._movement_log.history(sku.to_key(), since)]

    def handle_reference(self, reference: str) -> list[MovementDTO]:
        return [movement_dto(m) for m in self._movement_log.by_reference(parse_reference(reference))]


class ShowValuationHandler:

    def __init__(self, movements: StockMovementService) -> None:
        self._movements = movements

    def handle(self, warehouse_id: str | None = None) -> Decimal:
        return self._movements.valuation(warehouse_id)


class ShowReservationsHandler:

    def __init__(self, engine: ReservationEngine) -> None:
        self._engine = engine

    def handle(self, reservation_id: str) -> ReservationDTO:
        return reservation_dto(self._engine.get(reservation_id))

    def handle_reference(self, reference: str) -> list[ReservationDTO]:
        return [reservation_dto(r) for r in self._engine.for_reference(parse_reference(reference))]
