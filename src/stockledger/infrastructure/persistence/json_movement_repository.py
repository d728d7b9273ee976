"""JSON-file-backed implementation of the append-only MovementRepository."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from stockledger.domain.model.movement import Movement, MovementType
from stockledger.domain.model.references import (
    Reference,
    reference_from_raw,
    reference_to_raw,
)
from stockledger.domain.model.value_objects import StockKey
from stockledger.domain.repository.movement_repository import MovementRepository
from stockledger.infrastructure.persistence.json_file import (
    JsonFileRepository,
    decimal_from_raw,
    dt_from_raw,
    dt_to_raw,
    key_from_raw,
    key_matches,
    key_to_raw,
)


class JsonMovementRepository(JsonFileRepository, MovementRepository):

    # --- MovementRepository interface -----------------------------------------

    def append(self, movement: Movement) -> Movement:
        with self._lock:
            records = self._load_raw()
            next_id = records[-1]["id"] + 1 if records else 1
            stored = replace(movement, id=next_id)
            records.append(self._to_raw(stored))
            self._persist_raw(records)
        return stored

    def for_key(self, key: StockKey, since: datetime | None = None) -> list[Movement]:
        with self._lock:
            movements = [
                self._to_domain(raw) for raw in self._load_raw() if key_matches(raw, key)
            ]
        if since is not None:
            movements = [m for m in movements if m.created_at >= since]
        return movements

    def for_reference(self, reference: Reference) -> list[Movement]:
        wanted = reference_to_raw(reference)
        with self._lock:
            return [
                self._to_domain(raw)
                for raw in self._load_raw()
                if raw["reference"] == wanted
            ]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(movement: Movement) -> dict:
        return {
            "id": movement.id,
            **key_to_raw(movement.key),
            "type": movement.type.value,
            "quantity_delta": movement.quantity_delta,
            "quantity_before": movement.quantity_before,
            "quantity_after": movement.quantity_after,
            "unit_cost": str(movement.unit_cost) if movement.unit_cost is not None else None,
            "reference": reference_to_raw(movement.reference),
            "created_by": movement.created_by,
            "notes": movement.notes,
            "created_at": dt_to_raw(movement.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Movement:
        return Movement(
            id=raw["id"],
            key=key_from_raw(raw),
            type=MovementType(raw["type"]),
            quantity_delta=raw["quantity_delta"],
            quantity_before=raw["quantity_before"],
            quantity_after=raw["quantity_after"],
            unit_cost=decimal_from_raw(raw.get("unit_cost")),
            reference=reference_from_raw(raw["reference"]),
            created_by=raw.get("created_by"),
            notes=raw.get("notes"),
            created_at=dt_from_raw(raw["created_at"]),
        )
