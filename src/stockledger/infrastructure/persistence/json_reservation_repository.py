"""JSON-file-backed implementation of ReservationRepository."""

from __future__ import annotations

from datetime import datetime

from stockledger.domain.model.references import (
    Reference,
    reference_from_raw,
    reference_to_raw,
)
from stockledger.domain.model.reservation import Reservation, ReservationStatus
from stockledger.domain.model.value_objects import Quantity
from stockledger.domain.repository.reservation_repository import (
    ReservationRepository,
)
from stockledger.infrastructure.persistence.json_file import (
    JsonFileRepository,
    dt_from_raw,
    dt_to_raw,
    key_from_raw,
    key_to_raw,
)


class JsonReservationRepository(JsonFileRepository, ReservationRepository):

    # --- ReservationRepository interface --------------------------------------

    def get(self, reservation_id: str) -> Reservation | None:
        with self._lock:
            for raw in self._load_raw():
                if raw["id"] == reservation_id:
                    return self._to_domain(raw)
        return None

    def for_reference(self, reference: Reference) -> list[Reservation]:
        wanted = reference_to_raw(reference)
        with self._lock:
            return [
                self._to_domain(raw)
                for raw in self._load_raw()
                if raw["reference"] == wanted
            ]

    def held_expiring_by(self, now: datetime) -> list[Reservation]:
        with self._lock:
            held = [
                self._to_domain(raw)
                for raw in self._load_raw()
                if raw["status"] == ReservationStatus.HELD.value and raw.get("expires_at")
            ]
        return [r for r in held if r.is_expired_at(now)]

    def save(self, reservation: Reservation) -> None:
        with self._lock:
            records = self._load_raw()
            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(records):
                if raw["id"] == reservation.id:
                    records[i] = self._to_raw(reservation)
                    break
            else:
                records.append(self._to_raw(reservation))
            self._persist_raw(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(reservation: Reservation) -> dict:
        return {
            "id": reservation.id,
            **key_to_raw(reservation.key),
            "quantity": reservation.quantity.value,
            "reference": reference_to_raw(reservation.reference),
            "status": reservation.status.value,
            "created_at": dt_to_raw(reservation.created_at),
            "expires_at": dt_to_raw(reservation.expires_at),
            "settled_at": dt_to_raw(reservation.settled_at),
            "release_reason": reservation.release_reason,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Reservation:
        return Reservation(
            id=raw["id"],
            key=key_from_raw(raw),
            quantity=Quantity(raw["quantity"]),
            reference=reference_from_raw(raw["reference"]),
            status=ReservationStatus(raw["status"]),
            created_at=dt_from_raw(raw["created_at"]),
            expires_at=dt_from_raw(raw.get("expires_at")),
            settled_at=dt_from_raw(raw.get("settled_at")),
            release_reason=raw.get("release_reason"),
        )
