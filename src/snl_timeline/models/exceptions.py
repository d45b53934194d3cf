"""Exceptions for models module.

This module defines exceptions related to model validation
and data integrity errors.
"""

from snl_timeline.exceptions import InvalidInputError

__all__ = ["ValidationError"]


class ValidationError(InvalidInputError):
    """Raised when a timeline entry or query fails its field constraints.

    Always raised before any command is issued to the store.

    Attributes:
        errors: Individual constraint violations.

    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        """Initialize ValidationError.

        Args:
            message: Summary of the failure.
            errors: Individual constraint violations.

        """
        self.errors = errors or []
        super().__init__(message)
