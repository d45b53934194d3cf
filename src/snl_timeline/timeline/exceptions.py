"""Domain-specific exceptions for the timeline store.

This module defines the errors raised while reading and writing timeline
entries: missing entries, undecodable storage keys, and failures of the
external command executor.
"""

from snl_timeline.exceptions import SNLTimelineError

__all__ = [
    "MalformedKeyError",
    "NotFoundError",
    "StoreError",
    "TimelineError",
]


class TimelineError(SNLTimelineError):
    """Base exception for timeline storage errors."""

    pass


class NotFoundError(TimelineError):
    """Raised when a referenced timeline entry does not exist.

    Attributes:
        resource: Kind of thing that was looked up.
        identifier: Identifier that was looked up, if any.

    """

    def __init__(self, resource: str, identifier: str | None = None) -> None:
        """Initialize NotFoundError.

        Args:
            resource: Kind of thing that was looked up.
            identifier: Identifier that was looked up, if any.

        """
        self.resource = resource
        self.identifier = identifier
        message = f"{resource} not found"
        if identifier is not None:
            message += f": {identifier}"
        super().__init__(message)


class MalformedKeyError(TimelineError):
    """Raised when a storage key cannot be decoded into its components.

    Attributes:
        key: The offending storage key.
        reason: Why it could not be decoded.

    """

    def __init__(self, key: str, reason: str) -> None:
        """Initialize MalformedKeyError.

        Args:
            key: The offending storage key.
            reason: Why it could not be decoded.

        """
        self.key = key
        self.reason = reason
        super().__init__(f"Malformed storage key '{key}': {reason}")


class StoreError(TimelineError):
    """Raised when the command executor fails.

    The executor's exception is kept as ``cause`` (and chained as
    ``__cause__``); the store never retries.

    Attributes:
        operation: Store operation that issued the failing command.
        cause: The executor's exception.

    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        """Initialize StoreError.

        Args:
            operation: Store operation that issued the failing command.
            cause: The executor's exception.

        """
        self.operation = operation
        self.cause = cause
        super().__init__(f"Timeline store operation '{operation}' failed: {cause}")
