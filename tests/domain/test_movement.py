"""Unit tests for the Movement record."""

from decimal import Decimal

import pytest

from stockledger.domain.exceptions import InvalidArgument, ValidationError
from stockledger.domain.model.movement import Movement, MovementType
from stockledger.domain.model.references import OrderReference, PurchaseReference
from stockledger.domain.model.value_objects import StockKey

KEY = StockKey("P1", None, "W1")


def _movement(**overrides) -> Movement:
    fields = dict(
        key=KEY,
        type=MovementType.OUT,
        quantity_delta=-4,
        quantity_before=10,
        quantity_after=6,
        reference=OrderReference("42"),
        unit_cost=Decimal("2.50"),
    )
    fields.update(overrides)
    return Movement(**fields)


class TestMovementValidation:

    def test_arithmetic_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="arithmetic mismatch"):
            _movement(quantity_after=7)

    def test_zero_delta_rejected(self):
        with pytest.raises(InvalidArgument):
            _movement(quantity_delta=0, quantity_after=10)

    def test_positive_out_rejected(self):
        with pytest.raises(ValidationError, match="Stock-out"):
            _movement(quantity_delta=4, quantity_after=14)

    def test_negative_in_rejected(self):
        with pytest.raises(ValidationError, match="Stock-in"):
            _movement(type=MovementType.IN, reference=PurchaseReference("PO-1"))

    def test_movement_is_immutable(self):
        movement = _movement()
        with pytest.raises(AttributeError):
            movement.quantity_delta = -5


class TestMovementDisplay:

    def test_outgoing_helpers(self):
        movement = _movement()
        assert movement.is_outgoing
        assert not movement.is_incoming
        assert movement.absolute_quantity == 4
        assert movement.total_value == Decimal("10.00")
        assert movement.display_quantity == "-4"

    def test_incoming_display_has_plus_sign(self):
        movement = _movement(
            type=MovementType.IN,
            quantity_delta=1500,
            quantity_before=0,
            quantity_after=1500,
            reference=PurchaseReference("PO-1"),
        )
        assert movement.display_quantity == "+1,500"
        assert movement.type.label == "Stock In"
