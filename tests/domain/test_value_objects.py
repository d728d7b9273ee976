"""Unit tests for value objects and references."""

from decimal import Decimal

import pytest

from stockledger.domain.exceptions import InvalidArgument
from stockledger.domain.model.references import (
    AdjustmentReference,
    OrderReference,
    PurchaseReference,
    TransferReference,
    parse_reference,
    reference_from_raw,
    reference_to_raw,
)
from stockledger.domain.model.value_objects import (
    Quantity,
    StockKey,
    cost_of,
    weighted_average_cost,
)


class TestStockKey:

    def test_blank_variant_means_no_variant(self):
        assert StockKey("P1", "", "W1") == StockKey("P1", None, "W1")

    def test_str_includes_variant_and_warehouse(self):
        assert str(StockKey("P1", "RED", "W1")) == "P1/RED@W1"
        assert str(StockKey("P1", None, "W1")) == "P1@W1"

    def test_missing_product_rejected(self):
        with pytest.raises(InvalidArgument, match="Product ID"):
            StockKey("", None, "W1")

    def test_in_warehouse_keeps_sku(self):
        assert StockKey("P1", "RED", "W1").in_warehouse("W2") == StockKey("P1", "RED", "W2")

    def test_sort_key_orders_missing_variant_first(self):
        keys = [StockKey("P1", "B", "W1"), StockKey("P1", None, "W1")]
        assert sorted(keys, key=lambda k: k.sort_key)[0].variant_id is None


class TestQuantity:

    def test_zero_rejected(self):
        with pytest.raises(InvalidArgument, match="must be positive"):
            Quantity(0)

    def test_negative_rejected(self):
        with pytest.raises(InvalidArgument, match="must be positive"):
            Quantity(-3)

    def test_non_integer_rejected(self):
        with pytest.raises(InvalidArgument, match="must be an integer"):
            Quantity(1.5)


class TestCosts:

    def test_cost_is_rounded_to_cents(self):
        assert cost_of("4.505") == Decimal("4.51")

    def test_negative_cost_rejected(self):
        with pytest.raises(InvalidArgument):
            cost_of("-1")

    def test_garbage_cost_rejected(self):
        with pytest.raises(InvalidArgument, match="Invalid cost"):
            cost_of("abc")

    def test_weighted_average(self):
        assert weighted_average_cost(10, Decimal("4.00"), 10, Decimal("6.00")) == Decimal("5.00")

    def test_unknown_incoming_cost_keeps_average(self):
        assert weighted_average_cost(10, Decimal("4.00"), 5, None) == Decimal("4.00")

    def test_empty_record_takes_incoming_cost(self):
        assert weighted_average_cost(0, Decimal("9.99"), 5, Decimal("3.00")) == Decimal("3.00")


class TestReferences:

    def test_parse_order_with_item(self):
        assert parse_reference("order:42:7") == OrderReference("42", "7")

    def test_parse_each_kind(self):
        assert parse_reference("order:42") == OrderReference("42")
        assert parse_reference("transfer:T-1") == TransferReference("T-1")
        assert parse_reference("adjustment:A-3") == AdjustmentReference("A-3")
        assert parse_reference("purchase:PO-9") == PurchaseReference("PO-9")

    def test_parse_unknown_kind_rejected(self):
        with pytest.raises(InvalidArgument, match="Unknown reference type"):
            parse_reference("invoice:9")

    def test_parse_without_id_rejected(self):
        with pytest.raises(InvalidArgument, match="Expected 'kind:id'"):
            parse_reference("order")

    def test_raw_form_keeps_order_item(self):
        ref = OrderReference("42", "7")
        assert reference_to_raw(ref) == {"type": "order", "id": "42", "item_id": "7"}
        assert reference_from_raw(reference_to_raw(ref)) == ref

    def test_labels(self):
        assert OrderReference("42").label == "Order #42"
        assert TransferReference("T-1").label == "Transfer #T-1"
