"""Enumeration types for snl-timeline.

This module defines the enum types used throughout the library: timeline
entry classification and outcome, the SNL command vocabulary, and the
available partition schemes.
"""

from enum import Enum

__all__ = [
    "EntryCategory",
    "EntryStatus",
    "PartitionSchemeType",
    "SNLKind",
    "SNLOperation",
]


class EntryCategory(str, Enum):
    """Classification of a timeline entry.

    Attributes:
        general: Anything without a more specific category.
        ai: An interaction with an AI.
        workflow: A workflow execution.
        command: A command execution.
        security: A security-relevant action (usually system generated).
        config: A configuration change.
    """

    general = "general"
    ai = "ai"
    workflow = "workflow"
    command = "command"
    security = "security"
    config = "config"


class EntryStatus(str, Enum):
    """Outcome of the activity a timeline entry records.

    Attributes:
        success: Completed successfully.
        error: Failed; the entry carries an error message.
        pending: Still in progress.
        cancelled: Abandoned before completion.
    """

    success = "success"
    error = "error"
    pending = "pending"
    cancelled = "cancelled"


class SNLOperation(str, Enum):
    """Operations understood by the SNL command protocol."""

    set = "set"
    view = "view"
    list = "list"
    search = "search"
    remove = "remove"
    tag = "tag"
    untag = "untag"


class SNLKind(str, Enum):
    """Storage object kinds understood by the SNL command protocol."""

    enum = "enum"
    structure = "structure"
    pointer = "pointer"
    ipointer = "ipointer"


class PartitionSchemeType(str, Enum):
    """How timeline entries are laid out in the store.

    Attributes:
        flat: One entity per user, keys YYYY_MM_DD[_HHMM]_<id>.
        monthly: One entity per calendar month (YYYY-MM), keys are bare ids.
    """

    flat = "flat"
    monthly = "monthly"
