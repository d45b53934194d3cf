"""Library settings using pydantic-settings.

This module provides environment variable support for configuration
using pydantic-settings. Settings can be overridden via environment
variables with the appropriate prefix.

Environment Variables:
    SNL_TIMELINE_DATABASE: Database holding every user's timeline
    SNL_TIMELINE_ENTITY: Entity bucket used by the flat partition scheme
    SNL_TIMELINE_PARTITION_SCHEME: "flat" or "monthly"
    SNL_TIMELINE_INCLUDE_TIME_IN_KEY: Insert HHMM into flat storage keys
    SNL_TIMELINE_DEFAULT_PAGE_SIZE: Page size when a query gives none
    SNL_TIMELINE_MAX_PAGE_SIZE: Largest accepted page size
    SNL_TIMELINE_SEARCH_MIN_TERM_LENGTH: Shortest accepted search term
    SNL_TIMELINE_STORE_SIDE_SEARCH: Use the store's search command for candidates
    SNL_TIMELINE_RETENTION_DAYS: Default retention for purge_older_than
    SNL_TIMELINE_RECENT_LIMIT: Default size of recent()
    SNL_TIMELINE_LOG_VERBOSE: Enable debug logging
    SNL_TIMELINE_LOG_JSON_OUTPUT: Render logs as JSON
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from snl_timeline.config.defaults import (
    DEFAULT_DATABASE,
    DEFAULT_ENTITY,
    DEFAULT_INCLUDE_TIME_IN_KEY,
    DEFAULT_MAX_PAGE_SIZE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_PARTITION_SCHEME,
    DEFAULT_RECENT_LIMIT,
    DEFAULT_RETENTION_DAYS,
    DEFAULT_SEARCH_MIN_TERM_LENGTH,
    DEFAULT_STORE_SIDE_SEARCH,
    PAGE_SIZE_MIN,
    RETENTION_DAYS_MIN,
    SEARCH_MIN_TERM_LENGTH_MAX,
)
from snl_timeline.models.enums import PartitionSchemeType

__all__ = [
    "LoggingSettings",
    "Settings",
    "TimelineSettings",
    "get_settings",
]


class TimelineSettings(BaseSettings):
    """Settings for the TimelineStore.

    Attributes:
        database: Database segment of every storage path.
        entity: Entity bucket used by the flat partition scheme.
        partition_scheme: Which partition scheme the store writes and reads.
        include_time_in_key: Whether flat keys carry an HHMM segment.
        default_page_size: Page size used when a query does not give one.
        max_page_size: Largest accepted page size.
        search_min_term_length: Shortest accepted search term (after strip).
        store_side_search: Ask the store's search command for candidates.
        retention_days: Default retention window for purges.
        recent_limit: Default number of entries returned by recent().

    """

    model_config = SettingsConfigDict(
        env_prefix="SNL_TIMELINE_",
        extra="ignore",
    )

    database: str = Field(
        default=DEFAULT_DATABASE,
        min_length=1,
        description="Database segment of every storage path",
    )
    entity: str = Field(
        default=DEFAULT_ENTITY,
        min_length=1,
        description="Entity bucket used by the flat partition scheme",
    )
    partition_scheme: PartitionSchemeType = Field(
        default=PartitionSchemeType(DEFAULT_PARTITION_SCHEME),
        description="Partition scheme used on both write and read paths",
    )
    include_time_in_key: bool = Field(
        default=DEFAULT_INCLUDE_TIME_IN_KEY,
        description="Insert an HHMM segment into flat storage keys",
    )
    default_page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=PAGE_SIZE_MIN,
        description="Page size used when a query does not give one",
    )
    max_page_size: int = Field(
        default=DEFAULT_MAX_PAGE_SIZE,
        ge=PAGE_SIZE_MIN,
        description="Largest accepted page size",
    )
    search_min_term_length: int = Field(
        default=DEFAULT_SEARCH_MIN_TERM_LENGTH,
        ge=1,
        le=SEARCH_MIN_TERM_LENGTH_MAX,
        description="Shortest accepted search term",
    )
    store_side_search: bool = Field(
        default=DEFAULT_STORE_SIDE_SEARCH,
        description="Use the store's search command to fetch candidates",
    )
    retention_days: int = Field(
        default=DEFAULT_RETENTION_DAYS,
        ge=RETENTION_DAYS_MIN,
        description="Default retention window for purges, in days",
    )
    recent_limit: int = Field(
        default=DEFAULT_RECENT_LIMIT,
        ge=PAGE_SIZE_MIN,
        description="Default number of entries returned by recent()",
    )

    @model_validator(mode="after")
    def validate_page_sizes(self) -> "TimelineSettings":
        """Validate that the default page size fits under the maximum."""
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                "TimelineSettings.default_page_size must not exceed max_page_size"
            )
        return self


class LoggingSettings(BaseSettings):
    """Settings for structlog output.

    Attributes:
        verbose: Enable debug output.
        json_output: Render JSON instead of the console renderer.

    """

    model_config = SettingsConfigDict(
        env_prefix="SNL_TIMELINE_LOG_",
        extra="ignore",
    )

    verbose: bool = Field(default=False, description="Enable debug output")
    json_output: bool = Field(default=False, description="Render logs as JSON")


class Settings(BaseSettings):
    """Root settings container.

    Aggregates all subsystem settings into a single configuration object.
    Use get_settings() to access the cached singleton instance.

    Attributes:
        timeline: TimelineStore settings.
        logging: Logging settings.

    """

    model_config = SettingsConfigDict(
        env_prefix="SNL_TIMELINE_",
        extra="ignore",
    )

    timeline: TimelineSettings = Field(default_factory=TimelineSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings singleton.

    Returns:
        The Settings instance with values from environment variables.

    """
    return Settings()
