"""Exceptions for the SNL command layer.

This module defines the errors raised while deriving namespaces and
building or checking SNL command text.
"""

from snl_timeline.exceptions import InvalidInputError

__all__ = ["NamespaceError", "SNLCommandError"]


class NamespaceError(InvalidInputError):
    """Raised when an email cannot be normalized into a storage namespace."""

    pass


class SNLCommandError(InvalidInputError):
    """Raised when an SNL command cannot be built or is malformed."""

    pass
