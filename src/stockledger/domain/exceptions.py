"""Domain-level exceptions.

All ledger failures are expressed as subclasses of DomainException so the
CLI layer can catch them uniformly and display user-friendly messages.

``InsufficientStock`` and ``InvalidState`` are expected business outcomes.
``InvariantViolation`` means a lock-discipline bug or corrupted data and is
never recovered locally.  Subclasses of ``RetryableError`` are retried by
the ledger before they reach the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stockledger.domain.model.value_objects import StockKey


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or input constraint was violated."""


class InvalidArgument(ValidationError):
    """An operation was called with an unusable argument (e.g. zero quantity)."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStock(DomainException):
    """Not enough available stock to satisfy a request."""

    def __init__(self, key: StockKey, requested: int, available: int) -> None:
        self.key = key
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {key} "
            f"(need {requested}, have {available} available, "
            f"short by {self.shortfall})"
        )

    @property
    def shortfall(self) -> int:
        return self.requested - max(self.available, 0)


class InvalidState(DomainException):
    """A reservation transition is not allowed from its current status."""


class InvariantViolation(DomainException):
    """A mutation would break a stock invariant (negative on-hand, over-reservation)."""


class RetryableError(DomainException):
    """A transient conflict; the whole unit of work may be re-run."""


class InconsistentLedger(RetryableError):
    """The stored state changed underneath a read-modify-write."""


class LockTimeout(RetryableError):
    """A per-triple lock could not be acquired in time."""
