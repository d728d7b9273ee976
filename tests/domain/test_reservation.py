"""Unit tests for the Reservation state machine."""

from datetime import datetime, timedelta, timezone

import pytest

from stockledger.domain.exceptions import InvalidState
from stockledger.domain.model.references import OrderReference
from stockledger.domain.model.reservation import Reservation, ReservationStatus
from stockledger.domain.model.value_objects import Quantity, StockKey

NOW = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


def _reservation(**overrides) -> Reservation:
    fields = dict(
        id="r1",
        key=StockKey("P1", None, "W1"),
        quantity=Quantity(3),
        reference=OrderReference("42"),
        created_at=NOW,
    )
    fields.update(overrides)
    return Reservation(**fields)


class TestTransitions:

    def test_new_reservation_is_held(self):
        assert _reservation().status == ReservationStatus.HELD

    def test_commit_from_held(self):
        r = _reservation()
        r.commit(NOW)
        assert r.status == ReservationStatus.COMMITTED
        assert r.settled_at == NOW

    def test_release_records_reason(self):
        r = _reservation()
        r.release("customer cancelled", NOW)
        assert r.status == ReservationStatus.RELEASED
        assert r.release_reason == "customer cancelled"

    def test_expire_from_held(self):
        r = _reservation()
        r.expire(NOW)
        assert r.status == ReservationStatus.EXPIRED

    @pytest.mark.parametrize("settle", ["commit", "release", "expire"])
    def test_terminal_states_have_no_way_out(self, settle):
        r = _reservation()
        r.commit(NOW)
        with pytest.raises(InvalidState, match="expected held"):
            if settle == "release":
                r.release("late", NOW)
            else:
                getattr(r, settle)(NOW)
        assert r.status == ReservationStatus.COMMITTED


class TestExpiry:

    def test_no_expiry_never_expires(self):
        assert not _reservation().is_expired_at(NOW + timedelta(days=365))

    def test_expired_at_boundary(self):
        r = _reservation(expires_at=NOW)
        assert r.is_expired_at(NOW)
        assert not r.is_expired_at(NOW - timedelta(seconds=1))
