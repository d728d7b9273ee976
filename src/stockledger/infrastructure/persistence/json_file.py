"""Shared plumbing for the JSON-file-backed repositories.

Each repository owns one file holding a JSON list of records.  Reads and
read-modify-write cycles go through ``_lock`` so threads of one process never
interleave partial writes; the file is replaced atomically on every write.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from stockledger.domain.model.value_objects import StockKey


class JsonFileRepository:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


# --- Field codecs -------------------------------------------------------------


def key_to_raw(key: StockKey) -> dict:
    return {
        "product_id": key.product_id,
        "variant_id": key.variant_id,
        "warehouse_id": key.warehouse_id,
    }


def key_from_raw(raw: dict) -> StockKey:
    return StockKey(raw["product_id"], raw.get("variant_id"), raw["warehouse_id"])


def key_matches(raw: dict, key: StockKey) -> bool:
    return (
        raw["product_id"] == key.product_id
        and raw.get("variant_id") == key.variant_id
        and raw["warehouse_id"] == key.warehouse_id
    )


def dt_to_raw(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def dt_from_raw(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def decimal_from_raw(value: str | None) -> Decimal | None:
    return Decimal(value) if value is not None else None
