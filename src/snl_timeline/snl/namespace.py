"""Namespace derivation for per-user storage paths.

Every read and write path derives the user's namespace through
to_namespace(); the TimelineStore takes the codec as an injectable
callable so an alternative rule still applies everywhere at once.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from snl_timeline.config.defaults import NAMESPACE_MAX_LENGTH
from snl_timeline.snl.exceptions import NamespaceError

__all__ = ["NamespaceCodec", "to_namespace", "validate_namespace"]

NamespaceCodec = Callable[[str], str]

_SEPARATOR_CHARS = re.compile(r"[@.]")
_VALID_NAMESPACE = re.compile(r"^[a-z0-9_-]+$")


def validate_namespace(namespace: Any) -> str:
    """Check that a namespace is usable as a storage path segment.

    Args:
        namespace: Candidate namespace.

    Returns:
        The namespace, unchanged.

    Raises:
        NamespaceError: If it is empty, too long, or has characters outside
            lowercase letters, digits, underscore and hyphen.

    """
    if not isinstance(namespace, str) or not namespace:
        raise NamespaceError("Namespace must be a non-empty string")
    if len(namespace) > NAMESPACE_MAX_LENGTH:
        raise NamespaceError(
            f"Namespace must be {NAMESPACE_MAX_LENGTH} characters or less"
        )
    if not _VALID_NAMESPACE.match(namespace):
        raise NamespaceError(
            f"Namespace '{namespace}' can only contain lowercase letters, "
            "numbers, underscores and hyphens"
        )
    return namespace


def to_namespace(email: Any) -> str:
    """Derive the storage namespace for a user email.

    Lower-cases the address and replaces "@" and "." with "_", so
    "Jane.Doe@Example.com" becomes "jane_doe_example_com".

    Args:
        email: The user's email address.

    Returns:
        The normalized namespace.

    Raises:
        NamespaceError: If email is not a non-empty string, or the
            normalized result is not a valid namespace.

    """
    if not isinstance(email, str) or not email.strip():
        raise NamespaceError("Email is required to derive a timeline namespace")
    return validate_namespace(_SEPARATOR_CHARS.sub("_", email.strip().lower()))
