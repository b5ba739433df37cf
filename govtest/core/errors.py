"""Exception types shared by the trainer core, gateways and API server."""

from __future__ import annotations


class GovTestError(Exception):
    """Base class for errors raised by the trainer."""


class GenerationFailure(GovTestError):
    """Raised when the question generator fails or returns unusable data."""


class TipFailure(GovTestError):
    """Raised when the tip generator cannot produce coaching tips."""


class InvalidStateTransition(GovTestError, RuntimeError):
    """Raised when an operation is invoked in a state that forbids it."""


class InvalidInput(GovTestError, ValueError):
    """Raised for out-of-range indices, unknown ids or empty question sets."""
