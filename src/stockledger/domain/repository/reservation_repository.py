"""Abstract repository for the Reservation aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from stockledger.domain.model.references import Reference
from stockledger.domain.model.reservation import Reservation


class ReservationRepository(ABC):

    @abstractmethod
    def get(self, reservation_id: str) -> Reservation | None:
        """Return a reservation by its token, or None if not found."""

    @abstractmethod
    def for_reference(self, reference: Reference) -> list[Reservation]:
        """Return every reservation made for ``reference``."""

    @abstractmethod
    def held_expiring_by(self, now: datetime) -> list[Reservation]:
        """Return held reservations whose ``expires_at`` is at or before ``now``."""

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """Persist a new or updated reservation."""
