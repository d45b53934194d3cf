"""Base exceptions for snl-timeline.

This module defines the root exception hierarchy for the library. All
domain-specific exceptions inherit from SNLTimelineError, and every error
caused by bad caller input inherits from InvalidInputError.
"""

__all__ = ["InvalidInputError", "SNLTimelineError"]


class SNLTimelineError(Exception):
    """Base exception for all snl-timeline errors.

    Provides a common exception type for clients to catch library errors.
    """

    pass


class InvalidInputError(SNLTimelineError):
    """Raised when caller-supplied input is rejected before any I/O."""

    pass
