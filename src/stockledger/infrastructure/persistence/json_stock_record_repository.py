"""JSON-file-backed implementation of StockRecordRepository."""

from __future__ import annotations

from decimal import Decimal

from stockledger.domain.exceptions import InconsistentLedger
from stockledger.domain.model.stock_record import StockRecord
from stockledger.domain.model.value_objects import StockKey
from stockledger.domain.repository.stock_record_repository import (
    StockRecordRepository,
)
from stockledger.infrastructure.persistence.json_file import (
    JsonFileRepository,
    dt_from_raw,
    dt_to_raw,
    key_from_raw,
    key_matches,
    key_to_raw,
)


class JsonStockRecordRepository(JsonFileRepository, StockRecordRepository):

    # --- StockRecordRepository interface --------------------------------------

    def get(self, key: StockKey) -> StockRecord | None:
        with self._lock:
            for raw in self._load_raw():
                if key_matches(raw, key):
                    return self._to_domain(raw)
        return None

    def list_all(self) -> list[StockRecord]:
        with self._lock:
            return [self._to_domain(raw) for raw in self._load_raw()]

    def save(self, record: StockRecord, expected_version: int) -> None:
        with self._lock:
            records = self._load_raw()
            index = next(
                (i for i, raw in enumerate(records) if key_matches(raw, record.key)),
                None,
            )
            stored_version = records[index]["version"] if index is not None else 0
            if stored_version != expected_version:
                raise InconsistentLedger(
                    f"Stock record {record.key} is at version {stored_version}, "
                    f"expected {expected_version}"
                )

            record.version = expected_version + 1
            if index is None:
                records.append(self._to_raw(record))
            else:
                records[index] = self._to_raw(record)
            self._persist_raw(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: StockRecord) -> dict:
        return {
            **key_to_raw(record.key),
            "on_hand": record.on_hand,
            "reserved": record.reserved,
            "average_cost": str(record.average_cost),
            "last_movement_at": dt_to_raw(record.last_movement_at),
            "version": record.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockRecord:
        return StockRecord(
            key=key_from_raw(raw),
            on_hand=raw["on_hand"],
            reserved=raw.get("reserved", 0),
            average_cost=Decimal(raw.get("average_cost", "0.00")),
            last_movement_at=dt_from_raw(raw.get("last_movement_at")),
            version=raw["version"],
        )
