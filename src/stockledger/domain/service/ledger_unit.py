"""Runs one ledger mutation as a single locked, retryable unit of work.

A unit takes the locks of every triple it touches, does its reads and
writes, re-evaluates alerts for those triples and releases the locks.  A
``RetryableError`` (lost update, lock timeout) re-runs the whole unit from
its first read; anything else propagates unchanged.  Alert notifications are
dispatched only after the locks are released.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from stockledger.domain.exceptions import RetryableError
from stockledger.domain.model.alert import StockAlert
from stockledger.domain.model.value_objects import StockKey
from stockledger.domain.service.alert_evaluator import AlertEvaluator
from stockledger.domain.service.alert_notifier import AlertNotifier
from stockledger.domain.service.locks import TripleLockRegistry
from stockledger.domain.service.stock_record_store import StockRecordStore

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "ledger_unit_retry",
        attempt=retry_state.attempt_number,
        error=type(error).__name__,
        detail=str(error),
    )


class LedgerUnitRunner:

    def __init__(
        self,
        locks: TripleLockRegistry,
        store: StockRecordStore,
        evaluator: AlertEvaluator,
        notifier: AlertNotifier | None = None,
        retry_attempts: int = 3,
        retry_backoff: float = 0.05,
    ) -> None:
        self._locks = locks
        self._store = store
        self._evaluator = evaluator
        self._notifier = notifier
        self._retry_attempts = max(retry_attempts, 1)
        self._retry_backoff = retry_backoff

    def run(self, keys: Sequence[StockKey], work: Callable[[], T]) -> T:
        retrying = Retrying(
            retry=retry_if_exception_type(RetryableError),
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=self._retry_backoff, max=2),
            before_sleep=_log_retry,
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                with self._locks.hold(*keys):
                    result = work()
                    changed: list[StockAlert] = []
                    for key in dict.fromkeys(keys):
                        changed.extend(self._evaluator.reevaluate(key))
        self._notify(changed)
        return result

    def _notify(self, changed: list[StockAlert]) -> None:
        if self._notifier is None:
            return
        for alert in changed:
            if not alert.is_active:
                continue
            try:
                self._notifier.alert_triggered(alert, self._store.get(alert.key).available)
            except Exception:
                logger.exception(
                    "alert_notification_failed",
                    key=str(alert.key),
                    alert_type=alert.alert_type.value,
                )
