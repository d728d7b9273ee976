"""JSON-file-backed implementation of AlertRepository."""

from __future__ import annotations

from stockledger.domain.model.alert import AlertType, StockAlert
from stockledger.domain.model.value_objects import StockKey
from stockledger.domain.repository.alert_repository import AlertRepository
from stockledger.infrastructure.persistence.json_file import (
    JsonFileRepository,
    dt_from_raw,
    dt_to_raw,
    key_from_raw,
    key_matches,
    key_to_raw,
)


class JsonAlertRepository(JsonFileRepository, AlertRepository):

    # --- AlertRepository interface --------------------------------------------

    def for_key(self, key: StockKey) -> list[StockAlert]:
        with self._lock:
            return [
                self._to_domain(raw) for raw in self._load_raw() if key_matches(raw, key)
            ]

    def list_all(self) -> list[StockAlert]:
        with self._lock:
            return [self._to_domain(raw) for raw in self._load_raw()]

    def save(self, alert: StockAlert) -> None:
        with self._lock:
            records = self._load_raw()
            for i, raw in enumerate(records):
                if self._same_rule(raw, alert.key, alert.alert_type):
                    records[i] = self._to_raw(alert)
                    break
            else:
                records.append(self._to_raw(alert))
            self._persist_raw(records)

    def delete(self, key: StockKey, alert_type: AlertType) -> bool:
        with self._lock:
            records = self._load_raw()
            kept = [raw for raw in records if not self._same_rule(raw, key, alert_type)]
            if len(kept) == len(records):
                return False
            self._persist_raw(kept)
            return True

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _same_rule(raw: dict, key: StockKey, alert_type: AlertType) -> bool:
        return key_matches(raw, key) and raw["alert_type"] == alert_type.value

    @staticmethod
    def _to_raw(alert: StockAlert) -> dict:
        return {
            **key_to_raw(alert.key),
            "alert_type": alert.alert_type.value,
            "threshold": alert.threshold,
            "is_active": alert.is_active,
            "last_triggered_at": dt_to_raw(alert.last_triggered_at),
            "last_resolved_at": dt_to_raw(alert.last_resolved_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockAlert:
        return StockAlert(
            key=key_from_raw(raw),
            alert_type=AlertType(raw["alert_type"]),
            threshold=raw["threshold"],
            is_active=raw.get("is_active", False),
            last_triggered_at=dt_from_raw(raw.get("last_triggered_at")),
            last_resolved_at=dt_from_raw(raw.get("last_resolved_at")),
        )
