from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class QuoteInputError(DomainError):
    """Invalid parameters for a TWAP quote."""


class InvalidWindowError(QuoteInputError):
    """Averaging window must be a positive uint32 number of seconds."""


class SourceUnavailableError(DomainError):
    """The observation source could not be resolved or queried."""


class ArithmeticOverflowError(DomainError):
    """Result is not representable as uint256."""


class TickOutOfRangeError(DomainError):
    """Tick outside [MIN_TICK, MAX_TICK]."""
