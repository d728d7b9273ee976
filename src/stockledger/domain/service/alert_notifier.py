"""Port for the notification subsystem.

The ledger calls ``alert_triggered`` after the triple lock is released,
fire-and-forget: a failing notifier never undoes a stock mutation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockledger.domain.model.alert import StockAlert


class AlertNotifier(ABC):

    @abstractmethod
    def alert_triggered(self, alert: StockAlert, available: int) -> None:
        """Tell someone that ``alert`` has just become active."""
