"""Statistics over a collection of timeline entries.

A pure reduction: callers fetch the entries (see TimelineStore.statistics)
and summarize() does no I/O.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable
from typing import TypeVar

from snl_timeline.models.enums import EntryStatus
from snl_timeline.models.statistics import TimelineStatistics
from snl_timeline.models.timeline_entry import TimelineEntry

__all__ = ["summarize"]

K = TypeVar("K", bound=Hashable)


def _bump(counts: dict[K, int], key: K) -> None:
    counts[key] = counts.get(key, 0) + 1


def _most_frequent(counts: dict[K, int]) -> K | None:
    """Key with the highest count; the first one seen wins ties."""
    best: K | None = None
    best_count = 0
    for key, count in counts.items():
        if count > best_count:
            best, best_count = key, count
    return best


def summarize(entries: Iterable[TimelineEntry]) -> TimelineStatistics:
    """Reduce entries into counts, rates and most-active summaries.

    Args:
        entries: Entries to summarize, in the order they were fetched.

    Returns:
        The aggregate statistics. An empty collection yields zero counts,
        a 0 average duration and success rate, and no most-active day/hour.

    """
    by_category: dict[str, int] = {}
    by_status: dict[str, int] = {}
    by_month: dict[str, int] = {}
    by_day: dict[str, int] = {}
    by_hour: dict[int, int] = {}
    total = 0
    total_duration = 0.0
    successes = 0

    for entry in entries:
        total += 1
        _bump(by_category, entry.category.value)
        _bump(by_status, entry.status.value)
        _bump(by_month, f"{entry.year:04d}-{entry.month:02d}")
        _bump(by_day, f"{entry.year:04d}-{entry.month:02d}-{entry.day:02d}")
        _bump(by_hour, entry.hour)
        total_duration += entry.duration
        if entry.status == EntryStatus.success:
            successes += 1

    average_duration = round(total_duration / total, 2) if total else 0
    # Half-up rounding of the percentage
    success_rate = math.floor(successes * 100 / total + 0.5) if total else 0

    return TimelineStatistics(
        total=total,
        by_category=by_category,
        by_status=by_status,
        by_month=by_month,
        by_day=by_day,
        by_hour=by_hour,
        total_duration=total_duration,
        average_duration=average_duration,
        success_rate=success_rate,
        most_active_day=_most_frequent(by_day),
        most_active_hour=_most_frequent(by_hour),
    )
