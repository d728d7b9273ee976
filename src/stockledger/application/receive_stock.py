"""Application service: Receive Stock use case."""

from __future__ import annotations

from stockledger.application.dto import MovementDTO, SkuSpec, movement_dto
from stockledger.domain.model.references import PurchaseReference
from stockledger.domain.service.stock_movement_service import StockMovementService


class ReceiveStockHandler:

    def __init__(self, movements: StockMovementService) -> None:
        self._movements = movements

    def handle(
        self,
        sku: SkuSpec,
        quantity: int,
        purchase_id: str,
        unit_cost: str | None = None,
        created_by: str | None = None,
        notes: str | None = None,
    ) -> MovementDTO:
        """Book a delivery into a warehouse (creates the stock record if needed)."""
        movement = self._movements.receive(
            sku.to_key(),
            quantity,
            PurchaseReference(purchase_id),
            unit_cost=unit_cost,
            created_by=created_by,
            notes=notes,
        )
        return movement_dto(movement)
