"""Abstract repository for StockAlert rules."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockledger.domain.model.alert import AlertType, StockAlert
from stockledger.domain.model.value_objects import StockKey


class AlertRepository(ABC):

    @abstractmethod
    def for_key(self, key: StockKey) -> list[StockAlert]:
        """Return the alert rules configured for a triple."""

    @abstractmethod
    def list_all(self) -> list[StockAlert]:
        """Return every configured alert rule."""

    @abstractmethod
    def save(self, alert: StockAlert) -> None:
        """Persist a new or updated alert rule (one per triple and type)."""

    @abstractmethod
    def delete(self, key: StockKey, alert_type: AlertType) -> bool:
        """Remove a rule; return False if it did not exist."""
