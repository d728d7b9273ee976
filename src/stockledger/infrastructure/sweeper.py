"""Background sweep that expires stale reservations on a fixed interval.

The sweeper is the only component allowed to move a held reservation to
expired without an explicit caller action.
"""

from __future__ import annotations

import threading

import structlog

from stockledger.domain.service.reservation_engine import ReservationEngine

logger = structlog.get_logger(__name__)


class ReservationSweeper:

    def __init__(self, engine: ReservationEngine, interval: float) -> None:
        self._engine = engine
        self._interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def sweep_once(self) -> int:
        expired = self._engine.expire_stale()
        if expired:
            logger.info("reservation_sweep", expired=expired)
        return expired

    def run_forever(self) -> None:
        """Sweep until ``stop`` is called; a failed sweep is logged and retried next tick."""
        logger.info("reservation_sweeper_started", interval=self._interval)
        while not self._stop.is_set():
            try:
                self.sweep_once()
            except Exception:
                logger.exception("reservation_sweep_failed")
            self._stop.wait(self._interval)
        logger.info("reservation_sweeper_stopped")

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self.run_forever, name="reservation-sweeper", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
