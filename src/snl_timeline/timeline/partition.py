"""Partition schemes for timeline storage.

Entries are partitioned by calendar time so that a year, month or day can
be read with a single wildcard scan. Two layouts exist:

- flat: every entry of a user lives in one entity ("entries") under a key
  ``YYYY_MM_DD[_HHMM]_<id>``; periods are prefix patterns like ``2024_03_*``.
- monthly: one entity per month named ``YYYY-MM`` holding entries by bare
  id; a day is a month scan filtered afterwards, a year is twelve month
  scans that tolerate missing buckets.

The layouts are not interoperable, so a store writes and reads with exactly
one of them.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from snl_timeline.config.settings import TimelineSettings
from snl_timeline.models.enums import PartitionSchemeType
from snl_timeline.models.timeline_entry import TimelineEntry
from snl_timeline.timeline.exceptions import MalformedKeyError

__all__ = [
    "FlatPartitionScheme",
    "KEY_SEPARATOR",
    "MonthlyPartitionScheme",
    "PartitionKey",
    "PartitionScheme",
    "ScanTarget",
    "create_scheme",
    "decode_key",
]

KEY_SEPARATOR = "_"
WILDCARD = "*"

_MONTH_BUCKET = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class PartitionKey:
    """Decoded form of a flat storage key.

    Attributes:
        year: Calendar year.
        month: Month of year.
        day: Day of month.
        entry_id: The entry's id.
        hour: Hour of day, when the key carries a time segment.
        minute: Minute, when the key carries a time segment.

    """

    year: int
    month: int
    day: int
    entry_id: str
    hour: int | None = None
    minute: int | None = None

    @classmethod
    def for_entry(cls, entry: TimelineEntry) -> PartitionKey:
        """Build the key components of an entry."""
        return cls(
            year=entry.year,
            month=entry.month,
            day=entry.day,
            entry_id=entry.id,
            hour=entry.hour,
            minute=entry.minute,
        )

    def encode(self, include_time: bool = True) -> str:
        """Render the storage key.

        Raises:
            MalformedKeyError: If include_time is set but hour or minute is missing.

        """
        parts = [str(self.year), f"{self.month:02d}", f"{self.day:02d}"]
        if include_time:
            if self.hour is None or self.minute is None:
                raise MalformedKeyError(
                    self.entry_id, "a time segment needs both hour and minute"
                )
            parts.append(f"{self.hour:02d}{self.minute:02d}")
        parts.append(self.entry_id)
        return KEY_SEPARATOR.join(parts)


def _number(key: str, segment: str, name: str, low: int, high: int) -> int:
    if not segment.isdigit():
        raise MalformedKeyError(key, f"{name} segment '{segment}' is not numeric")
    value = int(segment)
    if not low <= value <= high:
        raise MalformedKeyError(key, f"{name} {value} is out of range")
    return value


def decode_key(key: str, include_time: bool = True) -> PartitionKey:
    """Decode a flat storage key; the exact inverse of PartitionKey.encode().

    Args:
        key: The storage key.
        include_time: Whether keys carry the HHMM segment.

    Returns:
        The decoded key components.

    Raises:
        MalformedKeyError: If segments are missing or not valid numbers.

    """
    parts = key.split(KEY_SEPARATOR)
    min_segments = 5 if include_time else 4
    if len(parts) < min_segments:
        raise MalformedKeyError(
            key, f"expected at least {min_segments} segments, got {len(parts)}"
        )

    year = _number(key, parts[0], "year", 1, 9999)
    month = _number(key, parts[1], "month", 1, 12)
    day = _number(key, parts[2], "day", 1, 31)

    hour = minute = None
    id_parts = parts[3:]
    if include_time:
        time_segment = parts[3]
        if len(time_segment) != 4:
            raise MalformedKeyError(key, f"time segment '{time_segment}' is not HHMM")
        hour = _number(key, time_segment[:2], "hour", 0, 23)
        minute = _number(key, time_segment[2:], "minute", 0, 59)
        id_parts = parts[4:]

    entry_id = KEY_SEPARATOR.join(id_parts)
    if not entry_id:
        raise MalformedKeyError(key, "entry id is empty")

    return PartitionKey(
        year=year, month=month, day=day, entry_id=entry_id, hour=hour, minute=minute
    )


@dataclass(frozen=True)
class ScanTarget:
    """One wildcard read against one entity.

    Attributes:
        entity: Entity (bucket) to read.
        pattern: Key pattern passed in the values() clause.
        optional: A failing read of this target is skipped, not raised.

    """

    entity: str
    pattern: str = WILDCARD
    optional: bool = False


class PartitionScheme(ABC):
    """Maps entries to storage locations and periods to scans."""

    scheme_type: PartitionSchemeType

    @abstractmethod
    def entity_for(self, entry: TimelineEntry) -> str:
        """Entity an entry is stored in."""

    @abstractmethod
    def key_for(self, entry: TimelineEntry) -> str:
        """Key an entry is stored under within its entity."""

    @abstractmethod
    def entry_id_for(self, entity: str, key: str) -> str:
        """Recover the entry id from a storage location."""

    @abstractmethod
    def scan_targets(
        self,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
    ) -> list[ScanTarget] | None:
        """Narrowest scans covering a period.

        Returns None when the period can only be covered by enumerating
        the user's buckets first.
        """

    @abstractmethod
    def lookup_pattern(self, entry_id: str) -> str:
        """Key pattern that finds an entry by id."""

    @abstractmethod
    def lookup_targets(self, entry_id: str) -> list[ScanTarget] | None:
        """Reads that find an entry by id, or None to try every bucket."""

    @abstractmethod
    def is_bucket(self, entity: str) -> bool:
        """Whether an entity name belongs to this layout."""

    @property
    def search_entity(self) -> str | None:
        """Entity the store-side search command can run against, if any."""
        return None

    def bucket_targets(
        self, entities: list[str], pattern: str = WILDCARD
    ) -> list[ScanTarget]:
        """Scan targets for enumerated bucket names, newest bucket first."""
        buckets = sorted((e for e in entities if self.is_bucket(e)), reverse=True)
        return [ScanTarget(entity, pattern) for entity in buckets]


class FlatPartitionScheme(PartitionScheme):
    """Single entity per user, date-prefixed keys."""

    scheme_type = PartitionSchemeType.flat

    def __init__(self, entity: str = "entries", include_time: bool = True) -> None:
        """Initialize the scheme.

        Args:
            entity: Name of the per-user entity bucket.
            include_time: Insert an HHMM segment into keys.

        """
        self.entity = entity
        self.include_time = include_time

    def entity_for(self, entry: TimelineEntry) -> str:
        return self.entity

    def key_for(self, entry: TimelineEntry) -> str:
        return PartitionKey.for_entry(entry).encode(self.include_time)

    def decode(self, key: str) -> PartitionKey:
        """Decode a key written by this scheme."""
        return decode_key(key, self.include_time)

    def entry_id_for(self, entity: str, key: str) -> str:
        return self.decode(key).entry_id

    def scan_targets(
        self,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
    ) -> list[ScanTarget]:
        prefix: list[str] = []
        if year is not None:
            prefix.append(str(year))
            if month is not None:
                prefix.append(f"{month:02d}")
                if day is not None:
                    prefix.append(f"{day:02d}")
        pattern = KEY_SEPARATOR.join([*prefix, WILDCARD])
        return [ScanTarget(self.entity, pattern)]

    def lookup_pattern(self, entry_id: str) -> str:
        return f"{WILDCARD}{KEY_SEPARATOR}{entry_id}"

    def lookup_targets(self, entry_id: str) -> list[ScanTarget]:
        return [ScanTarget(self.entity, self.lookup_pattern(entry_id))]

    def is_bucket(self, entity: str) -> bool:
        return entity == self.entity

    @property
    def search_entity(self) -> str:
        return self.entity


class MonthlyPartitionScheme(PartitionScheme):
    """One entity per calendar month, entries keyed by bare id."""

    scheme_type = PartitionSchemeType.monthly

    @staticmethod
    def bucket_name(year: int, month: int) -> str:
        """Entity name of a month bucket."""
        return f"{year:04d}-{month:02d}"

    def entity_for(self, entry: TimelineEntry) -> str:
        return self.bucket_name(entry.year, entry.month)

    def key_for(self, entry: TimelineEntry) -> str:
        return entry.id

    def entry_id_for(self, entity: str, key: str) -> str:
        return key

    def scan_targets(
        self,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
    ) -> list[ScanTarget] | None:
        if year is None:
            return None
        if month is not None:
            # Days are filtered after the month is fetched
            return [ScanTarget(self.bucket_name(year, month))]
        return [
            ScanTarget(self.bucket_name(year, m), optional=True)
            for m in range(12, 0, -1)
        ]

    def lookup_pattern(self, entry_id: str) -> str:
        return entry_id

    def lookup_targets(self, entry_id: str) -> None:
        return None

    def is_bucket(self, entity: str) -> bool:
        match = _MONTH_BUCKET.match(entity)
        return match is not None and 1 <= int(match.group(2)) <= 12


def create_scheme(settings: TimelineSettings) -> PartitionScheme:
    """Build the partition scheme selected by the settings."""
    if settings.partition_scheme == PartitionSchemeType.monthly:
        return MonthlyPartitionScheme()
    return FlatPartitionScheme(
        entity=settings.entity, include_time=settings.include_time_in_key
    )
