"""Receiving, adjusting, counting and transferring stock."""

from decimal import Decimal

import pytest

from stockledger.domain.exceptions import (
    InconsistentLedger,
    InsufficientStock,
    InvalidArgument,
)
from stockledger.domain.model.movement import MovementType
from stockledger.domain.model.references import (
    AdjustmentReference,
    OrderReference,
    PurchaseReference,
    TransferReference,
)
from stockledger.domain.model.stock_record import StockRecord
from tests.fakes import KEY, make_ledger

PO = PurchaseReference("PO-7")
FIX = AdjustmentReference("fix-1")


class TestReceive:

    def test_first_receipt_creates_record(self):
        ledger = make_ledger()

        movement = ledger.movements.receive(KEY, 10, PO, unit_cost="4.50", created_by="dock")

        record = ledger.store.get(KEY)
        assert record.exists
        assert record.on_hand == 10
        assert record.average_cost == Decimal("4.50")
        assert record.last_movement_at == ledger.clock()
        assert movement.type is MovementType.IN
        assert (movement.quantity_before, movement.quantity_after) == (0, 10)
        assert movement.created_by == "dock"

    def test_weighted_average_cost(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10, average_cost=Decimal("2.00"))])

        ledger.movements.receive(KEY, 30, PO, unit_cost=Decimal("4.00"))

        assert ledger.store.get(KEY).average_cost == Decimal("3.50")

    def test_receipt_without_cost_keeps_average(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10, average_cost=Decimal("2.00"))])
        ledger.movements.receive(KEY, 5, PO)
        assert ledger.store.get(KEY).average_cost == Decimal("2.00")

    def test_negative_cost_rejected(self):
        ledger = make_ledger()
        with pytest.raises(InvalidArgument, match="negative"):
            ledger.movements.receive(KEY, 5, PO, unit_cost="-1")
        assert ledger.movement_log.history(KEY) == []


class TestAdjust:

    def test_positive_and_negative_corrections(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10)])

        ledger.movements.adjust(KEY, 5, FIX)
        movement = ledger.movements.adjust(KEY, -3, FIX, notes="damaged")

        assert ledger.store.get(KEY).on_hand == 12
        assert movement.type is MovementType.ADJUSTMENT
        assert movement.quantity_delta == -3
        assert movement.notes == "damaged"

    def test_cannot_remove_reserved_stock(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10)])
        ledger.engine.reserve(KEY, 8, OrderReference("1"))

        with pytest.raises(InsufficientStock):
            ledger.movements.adjust(KEY, -3, FIX)

        assert ledger.store.get(KEY).on_hand == 10
        assert len(ledger.movement_log.history(KEY)) == 0

    @pytest.mark.parametrize("delta", [0, 1.5, True])
    def test_bad_delta_rejected(self, delta):
        ledger = make_ledger([StockRecord(KEY, on_hand=10)])
        with pytest.raises(InvalidArgument):
            ledger.movements.adjust(KEY, delta, FIX)


class TestCount:

    def test_count_writes_the_difference(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10)])

        movement = ledger.movements.count(KEY, 7, FIX)

        assert movement.quantity_delta == -3
        assert movement.notes == "Stock count: 7"
        assert ledger.store.get(KEY).on_hand == 7

    def test_matching_count_writes_nothing(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10)])
        assert ledger.movements.count(KEY, 10, FIX) is None
        assert ledger.movement_log.history(KEY) == []

    def test_negative_count_rejected(self):
        ledger = make_ledger()
        with pytest.raises(InvalidArgument):
            ledger.movements.count(KEY, -1, FIX)


class TestTransfer:

    def test_transfer_conserves_stock(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10, average_cost=Decimal("3.00"))])
        target = KEY.in_warehouse("W2")

        outgoing, incoming = ledger.movements.transfer(KEY, "W2", 4, transfer_id="T-1")

        assert ledger.store.get(KEY).on_hand == 6
        assert ledger.store.get(target).on_hand == 4
        assert ledger.store.get(target).average_cost == Decimal("3.00")
        assert outgoing.type is incoming.type is MovementType.TRANSFER
        assert outgoing.quantity_delta == -4
        assert incoming.quantity_delta == 4
        assert outgoing.reference == incoming.reference == TransferReference("T-1")
        assert len(ledger.movement_log.by_reference(TransferReference("T-1"))) == 2

    def test_transfer_limited_to_available(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10, reserved=8)])
        with pytest.raises(InsufficientStock):
            ledger.movements.transfer(KEY, "W2", 3)
        assert ledger.store.get(KEY.in_warehouse("W2")).on_hand == 0

    def test_same_warehouse_rejected(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10)])
        with pytest.raises(InvalidArgument, match="same warehouse"):
            ledger.movements.transfer(KEY, "W1", 3)


def test_valuation():
    other = KEY.in_warehouse("W2")
    ledger = make_ledger(
        [
            StockRecord(KEY, on_hand=10, average_cost=Decimal("2.50")),
            StockRecord(other, on_hand=4, average_cost=Decimal("1.25")),
        ]
    )

    assert ledger.movements.valuation() == Decimal("30.00")
    assert ledger.movements.valuation("W2") == Decimal("5.00")


class TestLostUpdateRetries:

    def test_receive_writes_one_movement(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10)], conflicts=1)

        ledger.movements.receive(KEY, 5, PO)

        assert ledger.store.get(KEY).on_hand == 15
        history = ledger.movement_log.history(KEY)
        assert [(m.quantity_before, m.quantity_after) for m in history] == [(10, 15)]

    def test_adjust_writes_one_movement(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10)], conflicts=2)

        ledger.movements.adjust(KEY, -3, FIX)

        assert ledger.store.get(KEY).on_hand == 7
        assert len(ledger.movement_log.history(KEY)) == 1

    def test_transfer_destination_conflict_writes_one_movement_per_leg(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10, average_cost=Decimal("3.00"))])
        target = KEY.in_warehouse("W2")
        ledger.stock_repo.inject_conflict(target)

        ledger.movements.transfer(KEY, "W2", 4, transfer_id="T-2")

        assert ledger.store.get(KEY).on_hand == 6
        assert ledger.store.get(target).on_hand == 4
        assert [m.quantity_delta for m in ledger.movement_log.history(KEY)] == [-4]
        assert [m.quantity_delta for m in ledger.movement_log.history(target)] == [4]

    def test_failed_transfer_leaves_source_untouched(self):
        ledger = make_ledger([StockRecord(KEY, on_hand=10)], retry_attempts=2)
        target = KEY.in_warehouse("W2")
        ledger.stock_repo.inject_conflict(target, times=5)

        with pytest.raises(InconsistentLedger):
            ledger.movements.transfer(KEY, "W2", 4)

        assert ledger.store.get(KEY).on_hand == 10
        assert ledger.movement_repo.all == []
