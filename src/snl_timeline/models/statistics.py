"""TimelineStatistics model for snl-timeline."""

from pydantic import Field

from snl_timeline.models.base import BaseSchema

__all__ = ["TimelineStatistics"]


class TimelineStatistics(BaseSchema):
    """Aggregate figures over a collection of timeline entries.

    Attributes:
        total: Number of entries.
        by_category: Entry count per category value.
        by_status: Entry count per status value.
        by_month: Entry count per "YYYY-MM".
        by_day: Entry count per "YYYY-MM-DD".
        by_hour: Entry count per hour of day.
        total_duration: Sum of durations (ms).
        average_duration: Mean duration (ms), 0 when there are no entries.
        success_rate: Percentage of successful entries, rounded, 0 when empty.
        most_active_day: Day with the most entries (first seen wins ties).
        most_active_hour: Hour with the most entries (first seen wins ties).

    """

    total: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
    by_status: dict[str, int] = Field(default_factory=dict)
    by_month: dict[str, int] = Field(default_factory=dict)
    by_day: dict[str, int] = Field(default_factory=dict)
    by_hour: dict[int, int] = Field(default_factory=dict)
    total_duration: float = 0
    average_duration: float = 0
    success_rate: int = 0
    most_active_day: str | None = None
    most_active_hour: int | None = None
