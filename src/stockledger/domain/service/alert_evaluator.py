"""Alert Evaluator — keeps StockAlert state in step with stock levels.

``reevaluate`` must run inside the same locked unit as the mutation that
changed the triple, so alert state never lags stock state by more than one
commit.
"""

from __future__ import annotations

import structlog

from stockledger.domain.clock import Clock, utc_now
from stockledger.domain.exceptions import EntityNotFoundError
from stockledger.domain.model.alert import AlertType, StockAlert
from stockledger.domain.model.value_objects import StockKey
from stockledger.domain.repository.alert_repository import AlertRepository
from stockledger.domain.service.stock_record_store import StockRecordStore

logger = structlog.get_logger(__name__)


class AlertEvaluator:

    def __init__(
        self,
        repo: AlertRepository,
        store: StockRecordStore,
        clock: Clock = utc_now,
    ) -> None:
        self._repo = repo
        self._store = store
        self._clock = clock

    def reevaluate(self, key: StockKey) -> list[StockAlert]:
        """Recompute every rule on ``key``; return the alerts that flipped."""
        rules = self._repo.for_key(key)
        if not rules:
            return []

        available = self._store.get(key).available
        now = self._clock()
        changed: list[StockAlert] = []
        for alert in rules:
            if alert.evaluate(available, now):
                self._repo.save(alert)
                changed.append(alert)
                logger.info(
                    "stock_alert_triggered" if alert.is_active else "stock_alert_resolved",
                    key=str(key),
                    alert_type=alert.alert_type.value,
                    threshold=alert.threshold,
                    available=available,
                )
        return changed

    def configure(self, key: StockKey, alert_type: AlertType, threshold: int) -> StockAlert:
        """Create or update a rule.

        The caller is expected to ``reevaluate`` the triple in the same
        locked unit so a freshly configured rule reflects current stock.
        """
        alert = next(
            (a for a in self._repo.for_key(key) if a.alert_type is alert_type), None
        )
        if alert is None:
            alert = StockAlert(key=key, alert_type=alert_type, threshold=threshold)
        else:
            alert.set_threshold(threshold)
        self._repo.save(alert)
        return alert

    def remove(self, key: StockKey, alert_type: AlertType) -> None:
        if not self._repo.delete(key, alert_type):
            raise EntityNotFoundError(f"No {alert_type.value} alert configured for {key}")

    def alerts(self, key: StockKey | None = None, active_only: bool = False) -> list[StockAlert]:
        found = self._repo.for_key(key) if key is not None else self._repo.list_all()
        if active_only:
            found = [a for a in found if a.is_active]
        return sorted(found, key=lambda a: (a.key.sort_key, a.alert_type.value))
