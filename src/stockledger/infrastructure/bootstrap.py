"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from stockledger.domain.service.alert_evaluator import AlertEvaluator
from stockledger.domain.service.alert_notifier import AlertNotifier
from stockledger.domain.service.ledger_unit import LedgerUnitRunner
from stockledger.domain.service.locks import TripleLockRegistry
from stockledger.domain.service.movement_log import MovementLog
from stockledger.domain.service.reservation_engine import ReservationEngine
from stockledger.domain.service.stock_movement_service import StockMovementService
from stockledger.domain.service.stock_record_store import StockRecordStore
from stockledger.infrastructure import config
from stockledger.infrastructure.notifier import LoggingAlertNotifier
from stockledger.infrastructure.persistence.json_alert_repository import (
    JsonAlertRepository,
)
from stockledger.infrastructure.persistence.json_movement_repository import (
    JsonMovementRepository,
)
from stockledger.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)
from stockledger.infrastructure.persistence.json_stock_record_repository import (
    JsonStockRecordRepository,
)
from stockledger.infrastructure.sweeper import ReservationSweeper


@dataclass(frozen=True)
class Ledger:
    """Every ledger service, sharing one store, lock registry and log."""

    store: StockRecordStore
    movement_log: MovementLog
    alerts: AlertEvaluator
    runner: LedgerUnitRunner
    reservations: ReservationEngine
    movements: StockMovementService


def build_ledger(
    data_dir: Path | None = None,
    notifier: AlertNotifier | None = None,
) -> Ledger:
    data_dir = data_dir or config.DATA_DIR

    store = StockRecordStore(JsonStockRecordRepository(data_dir / "stock_records.json"))
    movement_log = MovementLog(JsonMovementRepository(data_dir / "movements.json"), store)
    alerts = AlertEvaluator(JsonAlertRepository(data_dir / "alerts.json"), store)
    runner = LedgerUnitRunner(
        locks=TripleLockRegistry(timeout=config.LOCK_TIMEOUT_SECONDS),
        store=store,
        evaluator=alerts,
        notifier=notifier or LoggingAlertNotifier(),
        retry_attempts=config.LEDGER_RETRY_ATTEMPTS,
        retry_backoff=config.LEDGER_RETRY_BACKOFF_SECONDS,
    )
    reservations = ReservationEngine(
        store,
        movement_log,
        JsonReservationRepository(data_dir / "reservations.json"),
        runner,
        default_ttl=config.reservation_ttl(),
    )
    movements = StockMovementService(store, movement_log, runner)
    return Ledger(store, movement_log, alerts, runner, reservations, movements)


def reservation_sweeper(ledger: Ledger, interval: float | None = None) -> ReservationSweeper:
    return ReservationSweeper(
        ledger.reservations,
        interval if interval is not None else config.SWEEP_INTERVAL_SECONDS,
    )
