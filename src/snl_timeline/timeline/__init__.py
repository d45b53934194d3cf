"""Timeline storage.

Maps timeline entries onto time-partitioned SNL storage paths and provides
the TimelineStore plus the pure ranking and statistics helpers it uses.
"""

from snl_timeline.timeline.commands import TimelineCommands
from snl_timeline.timeline.exceptions import (
    MalformedKeyError,
    NotFoundError,
    StoreError,
    TimelineError,
)
from snl_timeline.timeline.partition import (
    FlatPartitionScheme,
    MonthlyPartitionScheme,
    PartitionKey,
    PartitionScheme,
    ScanTarget,
    create_scheme,
    decode_key,
)
from snl_timeline.timeline.ranking import rank_by_relevance, relevance_score
from snl_timeline.timeline.statistics import summarize
from snl_timeline.timeline.store import TimelineStore

__all__ = [
    "FlatPartitionScheme",
    "MalformedKeyError",
    "MonthlyPartitionScheme",
    "NotFoundError",
    "PartitionKey",
    "PartitionScheme",
    "ScanTarget",
    "StoreError",
    "TimelineCommands",
    "TimelineError",
    "TimelineStore",
    "create_scheme",
    "decode_key",
    "rank_by_relevance",
    "relevance_score",
    "summarize",
]
