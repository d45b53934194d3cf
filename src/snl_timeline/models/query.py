"""TimelineQuery model for snl-timeline.

This module defines the filters and paging a caller can apply when
listing, searching or summarizing a timeline.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from snl_timeline.models.base import BaseSchema
from snl_timeline.models.enums import EntryCategory, EntryStatus
from snl_timeline.models.exceptions import ValidationError
from snl_timeline.models.timeline_entry import TimelineEntry

__all__ = ["TimelineQuery"]


class TimelineQuery(BaseSchema):
    """Filters and paging for timeline reads.

    The calendar fields select which partition is scanned; the remaining
    filters are applied to the fetched candidates. A limit of None means
    the store's configured default page size.

    Attributes:
        year: Restrict to a calendar year.
        month: Restrict to a month of year (requires year).
        day: Restrict to a day of month (requires month).
        hour: Restrict to an hour of day.
        category: Restrict to one category.
        status: Restrict to one status.
        start_date: Earliest created_at accepted (inclusive).
        end_date: Latest created_at accepted (inclusive).
        page: 1-based page number.
        limit: Page size.

    """

    year: int | None = Field(default=None, ge=1, le=9999)
    month: int | None = Field(default=None, ge=1, le=12)
    day: int | None = Field(default=None, ge=1, le=31)
    hour: int | None = Field(default=None, ge=0, le=23)
    category: EntryCategory | None = None
    status: EntryStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    page: int = Field(default=1, ge=1)
    limit: int | None = Field(default=None, ge=1)

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_dates(cls, v: datetime | None) -> datetime | None:
        """Normalize to UTC; naive timestamps are taken to be UTC already."""
        if v is None:
            return None
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @model_validator(mode="after")
    def validate_model(self) -> TimelineQuery:
        """Validate that the calendar fields nest and the date range is ordered."""
        if self.month is not None and self.year is None:
            raise ValueError("TimelineQuery.month requires year")
        if self.day is not None and self.month is None:
            raise ValueError("TimelineQuery.day requires month")
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            raise ValueError("TimelineQuery.start_date must not be after end_date")
        return self

    @classmethod
    def create(cls, **filters: Any) -> TimelineQuery:
        """Build a query, reporting constraint failures as ValidationError.

        Raises:
            ValidationError: If any filter is out of range or inconsistent.

        """
        try:
            return cls(**filters)
        except PydanticValidationError as e:
            errors = [err["msg"] for err in e.errors()]
            raise ValidationError(
                f"Invalid timeline query: {'; '.join(errors)}", errors=errors
            ) from e

    def matches(self, entry: TimelineEntry) -> bool:
        """Check an entry against every filter (paging excluded)."""
        if self.year is not None and entry.year != self.year:
            return False
        if self.month is not None and entry.month != self.month:
            return False
        if self.day is not None and entry.day != self.day:
            return False
        if self.hour is not None and entry.hour != self.hour:
            return False
        if self.category is not None and entry.category != self.category:
            return False
        if self.status is not None and entry.status != self.status:
            return False
        if self.start_date is not None and entry.created_at < self.start_date:
            return False
        if self.end_date is not None and entry.created_at > self.end_date:
            return False
        return True
