"""Store event models for the observability hook.

This module defines the StoreEvent and StoreEventType passed to the
on_event callback a TimelineStore is constructed with.
"""

from enum import Enum
from typing import Any

from snl_timeline.models.base import BaseSchema

__all__ = ["StoreEvent", "StoreEventType"]


class StoreEventType(Enum):
    """Types of events emitted by the timeline store."""

    # Command handed to the executor
    COMMAND_ISSUED = "command_issued"

    # Executor raised while running a command
    COMMAND_FAILED = "command_failed"

    ENTRY_ADDED = "entry_added"
    ENTRY_UPDATED = "entry_updated"
    ENTRY_REMOVED = "entry_removed"
    ENTRY_TAGGED = "entry_tagged"
    ENTRY_UNTAGGED = "entry_untagged"

    # A month bucket could not be read during a year scan
    BUCKET_SKIPPED = "bucket_skipped"

    # A single deletion failed during a purge
    PURGE_SKIPPED = "purge_skipped"

    PURGE_COMPLETED = "purge_completed"


class StoreEvent(BaseSchema):
    """An event emitted by the timeline store.

    Attributes:
        event_type: The type of store event.
        message: A human-readable description of the event.
        data: Optional additional data about the event.

    """

    event_type: StoreEventType
    message: str
    data: dict[str, Any] | None = None
