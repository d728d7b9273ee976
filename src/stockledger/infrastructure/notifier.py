"""Default AlertNotifier: hands triggered alerts to the log pipeline."""

from __future__ import annotations

import structlog

from stockledger.domain.model.alert import StockAlert
from stockledger.domain.service.alert_notifier import AlertNotifier

logger = structlog.get_logger(__name__)


class LoggingAlertNotifier(AlertNotifier):

    def alert_triggered(self, alert: StockAlert, available: int) -> None:
        logger.warning(
            "stock_alert",
            key=str(alert.key),
            alert_type=alert.alert_type.value,
            threshold=alert.threshold,
            available=available,
            triggered_at=alert.last_triggered_at.isoformat() if alert.last_triggered_at else None,
        )
