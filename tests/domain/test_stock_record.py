"""Unit tests for the StockRecord aggregate."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from stockledger.domain.exceptions import InvariantViolation
from stockledger.domain.model.stock_record import StockRecord
from stockledger.domain.model.value_objects import StockKey

KEY = StockKey("P1", None, "W1")
NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


class TestStockRecordApply:

    def test_reserve_reduces_available(self):
        record = StockRecord(KEY, on_hand=100)
        record.apply(0, 30, NOW)
        assert record.available == 70
        assert record.reserved == 30

    def test_reserved_change_does_not_touch_last_movement(self):
        record = StockRecord(KEY, on_hand=100)
        record.apply(0, 30, NOW)
        assert record.last_movement_at is None

    def test_on_hand_change_stamps_last_movement(self):
        record = StockRecord(KEY, on_hand=10)
        record.apply(5, 0, NOW)
        assert record.on_hand == 15
        assert record.last_movement_at == NOW

    def test_negative_on_hand_rejected(self):
        record = StockRecord(KEY, on_hand=3)
        with pytest.raises(InvariantViolation, match="would become -1"):
            record.apply(-4, 0, NOW)
        assert record.on_hand == 3

    def test_reserved_above_on_hand_rejected(self):
        record = StockRecord(KEY, on_hand=5, reserved=5)
        with pytest.raises(InvariantViolation, match="exceed on-hand"):
            record.apply(0, 1, NOW)
        assert record.reserved == 5

    def test_negative_reserved_rejected(self):
        record = StockRecord(KEY, on_hand=5, reserved=1)
        with pytest.raises(InvariantViolation):
            record.apply(0, -2, NOW)

    def test_removing_reserved_stock_from_on_hand_rejected(self):
        record = StockRecord(KEY, on_hand=10, reserved=8)
        with pytest.raises(InvariantViolation):
            record.apply(-3, 0, NOW)

    def test_average_cost_override(self):
        record = StockRecord(KEY)
        record.apply(4, 0, NOW, average_cost=Decimal("2.50"))
        assert record.average_cost == Decimal("2.50")
        assert record.stock_value == Decimal("10.00")


class TestStockRecordEmpty:

    def test_empty_record_is_zero_valued_and_unsaved(self):
        record = StockRecord.empty(KEY)
        assert record.on_hand == 0
        assert record.reserved == 0
        assert record.available == 0
        assert not record.exists
