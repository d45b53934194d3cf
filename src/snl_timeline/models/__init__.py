"""Models module for snl-timeline.

This module contains the data models of the library:
- base: BaseSchema for Pydantic models
- enums: EntryCategory, EntryStatus, SNLOperation, SNLKind, PartitionSchemeType
- timeline_entry: TimelineEntry and its helpers
- query: TimelineQuery
- statistics: TimelineStatistics
- events: StoreEvent, StoreEventType
- exceptions: ValidationError
"""

from snl_timeline.models.base import BaseSchema
from snl_timeline.models.enums import (
    EntryCategory,
    EntryStatus,
    PartitionSchemeType,
    SNLKind,
    SNLOperation,
)
from snl_timeline.models.events import StoreEvent, StoreEventType
from snl_timeline.models.exceptions import ValidationError
from snl_timeline.models.query import TimelineQuery
from snl_timeline.models.statistics import TimelineStatistics
from snl_timeline.models.timeline_entry import (
    TimelineEntry,
    format_duration,
    generate_entry_id,
)

__all__ = [
    # Base
    "BaseSchema",
    # Enums
    "EntryCategory",
    "EntryStatus",
    "PartitionSchemeType",
    "SNLKind",
    "SNLOperation",
    # Exceptions
    "ValidationError",
    # Timeline models
    "StoreEvent",
    "StoreEventType",
    "TimelineEntry",
    "TimelineQuery",
    "TimelineStatistics",
    "format_duration",
    "generate_entry_id",
]
