"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from stockledger.domain.model.alert import StockAlert
from stockledger.domain.model.movement import Movement
from stockledger.domain.model.reservation import Reservation
from stockledger.domain.model.stock_record import StockRecord
from stockledger.domain.model.value_objects import StockKey


@dataclass(frozen=True)
class SkuSpec:
    """Input: which product (and variant) in which warehouse."""

    product_id: str
    warehouse_id: str
    variant_id: str | None = None

    def to_key(self) -> StockKey:
        return StockKey(self.product_id.strip(), self.variant_id, self.warehouse_id.strip())


@dataclass(frozen=True)
class ReservationLineSpec:
    """Input: one order line to reserve."""

    sku: SkuSpec
    quantity: int


@dataclass(frozen=True)
class StockLineDTO:
    sku: str
    on_hand: int
    reserved: int
    available: int
    average_cost: str
    last_movement_at: str | None


@dataclass(frozen=True)
class MovementDTO:
    id: int
    sku: str
    type: str
    quantity: str  # signed, e.g. "+5" / "-4"
    before: int
    after: int
    unit_cost: str | None
    reference: str
    created_by: str | None
    notes: str | None
    created_at: str


@dataclass(frozen=True)
class ReservationDTO:
    id: str
    sku: str
    quantity: int
    status: str
    reference: str
    created_at: str
    expires_at: str | None


@dataclass(frozen=True)
class AlertDTO:
    sku: str
    alert_type: str
    threshold: int
    is_active: bool
    last_triggered_at: str | None
    last_resolved_at: str | None


# --- Mapping ------------------------------------------------------------------

_TIME_FORMAT = "%Y-%m-%d %H:%M UTC"


def stock_line(record: StockRecord) -> StockLineDTO:
    return StockLineDTO(
        sku=str(record.key),
        on_hand=record.on_hand,
        reserved=record.reserved,
        available=record.available,
        average_cost=str(record.average_cost),
        last_movement_at=(
            record.last_movement_at.strftime(_TIME_FORMAT) if record.last_movement_at else None
        ),
    )


def movement_dto(movement: Movement) -> MovementDTO:
    return MovementDTO(
        id=movement.id,  # type: ignore[arg-type]
        sku=str(movement.key),
        type=movement.type.label,
        quantity=movement.display_quantity,
        before=movement.quantity_before,
        after=movement.quantity_after,
        unit_cost=str(movement.unit_cost) if movement.unit_cost is not None else None,
        reference=movement.reference.label,
        created_by=movement.created_by,
        notes=movement.notes,
        created_at=movement.created_at.strftime(_TIME_FORMAT),
    )


def reservation_dto(reservation: Reservation) -> ReservationDTO:
    return ReservationDTO(
        id=reservation.id,
        sku=str(reservation.key),
        quantity=reservation.quantity.value,
        status=reservation.status.value,
        reference=reservation.reference.label,
        created_at=reservation.created_at.strftime(_TIME_FORMAT),
        expires_at=(
            reservation.expires_at.strftime(_TIME_FORMAT) if reservation.expires_at else None
        ),
    )


def alert_dto(alert: StockAlert) -> AlertDTO:
    return AlertDTO(
        sku=str(alert.key),
        alert_type=alert.alert_type.value,
        threshold=alert.threshold,
        is_active=alert.is_active,
        last_triggered_at=(
            alert.last_triggered_at.strftime(_TIME_FORMAT) if alert.last_triggered_at else None
        ),
        last_resolved_at=(
            alert.last_resolved_at.strftime(_TIME_FORMAT) if alert.last_resolved_at else None
        ),
    )
