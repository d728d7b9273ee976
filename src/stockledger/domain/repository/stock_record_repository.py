"""Abstract repository for the StockRecord aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockledger.domain.model.stock_record import StockRecord
from stockledger.domain.model.value_objects import StockKey


class StockRecordRepository(ABC):

    @abstractmethod
    def get(self, key: StockKey) -> StockRecord | None:
        """Return a detached copy of the record for a triple, or None."""

    @abstractmethod
    def list_all(self) -> list[StockRecord]:
        """Return every stock record."""

    @abstractmethod
    def save(self, record: StockRecord, expected_version: int) -> None:
        """Persist ``record`` if the stored version equals ``expected_version``.

        On success the stored version becomes ``expected_version + 1`` and
        ``record.version`` is updated to match.  Raises InconsistentLedger
        when the stored version has moved on.
        """
