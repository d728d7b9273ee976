"""Unit tests for StockAlert threshold evaluation."""

from datetime import datetime, timezone

import pytest

from stockledger.domain.exceptions import InvalidArgument
from stockledger.domain.model.alert import AlertType, StockAlert
from stockledger.domain.model.value_objects import StockKey

KEY = StockKey("P1", None, "W1")
NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


class TestLowStock:

    def test_triggers_at_threshold(self):
        alert = StockAlert(KEY, AlertType.LOW_STOCK, threshold=3)
        assert alert.evaluate(3, NOW) is True
        assert alert.is_active
        assert alert.last_triggered_at == NOW

    def test_already_active_does_not_retrigger(self):
        alert = StockAlert(KEY, AlertType.LOW_STOCK, threshold=3, is_active=True)
        assert alert.evaluate(1, NOW) is False

    def test_clears_above_threshold(self):
        alert = StockAlert(KEY, AlertType.LOW_STOCK, threshold=3, is_active=True)
        assert alert.evaluate(4, NOW) is True
        assert not alert.is_active
        assert alert.last_resolved_at == NOW


class TestOutOfStock:

    def test_threshold_is_always_zero(self):
        alert = StockAlert(KEY, AlertType.OUT_OF_STOCK, threshold=7)
        assert alert.threshold == 0
        assert alert.evaluate(1, NOW) is False
        assert alert.evaluate(0, NOW) is True


class TestOverstock:

    def test_triggers_at_or_above_threshold(self):
        alert = StockAlert(KEY, AlertType.OVERSTOCK, threshold=100)
        assert alert.evaluate(99, NOW) is False
        assert alert.evaluate(100, NOW) is True

    def test_clears_below_threshold(self):
        alert = StockAlert(KEY, AlertType.OVERSTOCK, threshold=100, is_active=True)
        assert alert.evaluate(50, NOW) is True
        assert not alert.is_active


def test_negative_threshold_rejected():
    with pytest.raises(InvalidArgument):
        StockAlert(KEY, AlertType.LOW_STOCK, threshold=-1)
