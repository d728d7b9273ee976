"""Abstract repository for the append-only movement ledger.

There is deliberately no update or delete method.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from stockledger.domain.model.movement import Movement
from stockledger.domain.model.references import Reference
from stockledger.domain.model.value_objects import StockKey


class MovementRepository(ABC):

    @abstractmethod
    def append(self, movement: Movement) -> Movement:
        """Write a movement and return it with its sequence id assigned."""

    @abstractmethod
    def for_key(self, key: StockKey, since: datetime | None = None) -> list[Movement]:
        """Return a triple's movements in append order."""

    @abstractmethod
    def for_reference(self, reference: Reference) -> list[Movement]:
        """Return every movement caused by ``reference``, in append order."""
