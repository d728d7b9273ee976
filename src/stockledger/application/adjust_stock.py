"""Application service: manual adjustments and stock counts.

Both produce ``adjustment`` movements referencing an adjustment id; when the
caller has none, a short one is generated so the movements can still be
looked up together.
"""

from __future__ import annotations

from uuid import uuid4

from stockledger.application.dto import MovementDTO, SkuSpec, movement_dto
from stockledger.domain.model.references import AdjustmentReference
from stockledger.domain.service.stock_movement_service import StockMovementService


def _adjustment_reference(adjustment_id: str | None) -> AdjustmentReference:
    return AdjustmentReference(adjustment_id or uuid4().hex[:12])


class AdjustStockHandler:

    def __init__(self, movements: StockMovementService) -> None:
        self._movements = movements

    def handle(
        self,
        sku: SkuSpec,
        delta: int,
        reason: str,
        adjustment_id: str | None = None,
        created_by: str | None = None,
    ) -> MovementDTO:
        movement = self._movements.adjust(
            sku.to_key(),
            delta,
            _adjustment_reference(adjustment_id),
            created_by=created_by,
            notes=reason,
        )
        return movement_dto(movement)


class CountStockHandler:

    def __init__(self, movements: StockMovementService) -> None:
        self._movements = movements

    def handle(
        self,
        sku: SkuSpec,
        counted: int,
        adjustment_id: str | None = None,
        created_by: str | None = None,
    ) -> MovementDTO | None:
        """Set on-hand to a counted quantity; None if nothing had to change."""
        movement = self._movements.count(
            sku.to_key(),
            counted,
            _adjustment_reference(adjustment_id),
            created_by=created_by,
        )
        return movement_dto(movement) if movement is not None else None
