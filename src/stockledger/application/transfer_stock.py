"""Application service: Transfer Stock use case."""

from __future__ import annotations

from stockledger.application.dto import MovementDTO, SkuSpec, movement_dto
from stockledger.domain.service.stock_movement_service import StockMovementService


class TransferStockHandler:

    def __init__(self, movements: StockMovementService) -> None:
        self._movements = movements

    def handle(
        self,
        sku: SkuSpec,
        to_warehouse_id: str,
        quantity: int,
        transfer_id: str | None = None,
        created_by: str | None = None,
    ) -> tuple[MovementDTO, MovementDTO]:
        outgoing, incoming = self._movements.transfer(
            sku.to_key(),
            to_warehouse_id.strip(),
            quantity,
            transfer_id=transfer_id,
            created_by=created_by,
        )
        return movement_dto(outgoing), movement_dto(incoming)
