"""Application services: configure, remove and list stock alert rules."""

from __future__ import annotations

from stockledger.application.dto import AlertDTO, SkuSpec, alert_dto
from stockledger.domain.exceptions import InvalidArgument
from stockledger.domain.model.alert import AlertType, StockAlert
from stockledger.domain.service.alert_evaluator import AlertEvaluator
from stockledger.domain.service.ledger_unit import LedgerUnitRunner


def _alert_type(raw: str) -> AlertType:
    try:
        return AlertType(raw.strip().lower())
    except ValueError:
        choices = ", ".join(t.value for t in AlertType)
        raise InvalidArgument(f"Unknown alert type '{raw}'. Expected one of: {choices}")


class ConfigureAlertHandler:

    def __init__(self, evaluator: AlertEvaluator, runner: LedgerUnitRunner) -> None:
        self._evaluator = evaluator
        self._runner = runner

    def handle(self, sku: SkuSpec, alert_type: str, threshold: int = 0) -> AlertDTO:
        """Create or update a rule; it is evaluated against current stock at once."""
        key = sku.to_key()
        kind = _alert_type(alert_type)

        def work() -> StockAlert:
            return self._evaluator.configure(key, kind, threshold)

        self._runner.run([key], work)
        # Re-read so the DTO carries the state produced by the re-evaluation.
        current = next(a for a in self._evaluator.alerts(key) if a.alert_type is kind)
        return alert_dto(current)


class RemoveAlertHandler:

    def __init__(self, evaluator: AlertEvaluator) -> None:
        self._evaluator = evaluator

    def handle(self, sku: SkuSpec, alert_type: str) -> None:
        self._evaluator.remove(sku.to_key(), _alert_type(alert_type))


class ShowAlertsHandler:

    def __init__(self, evaluator: AlertEvaluator) -> None:
        self._evaluator = evaluator

    def handle(self, sku: SkuSpec | None = None, active_only: bool = False) -> list[AlertDTO]:
        key = sku.to_key() if sku is not None else None
        return [alert_dto(a) for a in self._evaluator.alerts(key, active_only=active_only)]
