"""Pytest configuration and shared fixtures for the snl-timeline test suite.

This module provides the in-memory executor, store instances wired to it,
and a factory for valid timeline entries used across unit and integration
tests.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest
from fixtures import TOKEN, USER_EMAIL, InMemorySNLExecutor

from snl_timeline.config.settings import TimelineSettings
from snl_timeline.models.enums import PartitionSchemeType
from snl_timeline.models.events import StoreEvent
from snl_timeline.models.timeline_entry import TimelineEntry
from snl_timeline.timeline.store import TimelineStore


@pytest.fixture
def token() -> str:
    """Credential passed to every store call."""
    return TOKEN


@pytest.fixture
def make_entry() -> Callable[..., TimelineEntry]:
    """Provide a factory for valid timeline entries.

    Defaults describe a successful login by jane@example.com at
    2024-03-15 10:30 UTC; any field can be overridden by keyword.

    Returns:
        A callable building a TimelineEntry from keyword overrides.
    """

    def _make(**overrides: Any) -> TimelineEntry:
        fields: dict[str, Any] = {
            "id": "timeline_1",
            "user_id": "user-1",
            "user_email": USER_EMAIL,
            "ai_name": "assistant",
            "action": "login",
            "created_at": datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc),
        }
        fields.update(overrides)
        return TimelineEntry(**fields)

    return _make


@pytest.fixture
def executor() -> InMemorySNLExecutor:
    """Provide an empty in-memory SNL store."""
    return InMemorySNLExecutor()


@pytest.fixture
def settings() -> TimelineSettings:
    """Provide default timeline settings independent of the environment."""
    return TimelineSettings(
        database="timeline",
        entity="entries",
        partition_scheme="flat",
        include_time_in_key=True,
        default_page_size=50,
        max_page_size=1000,
        search_min_term_length=2,
        store_side_search=False,
        retention_days=90,
        recent_limit=10,
    )


@pytest.fixture
def events() -> list[StoreEvent]:
    """Collect the events a store emits."""
    return []


@pytest.fixture
def store(
    executor: InMemorySNLExecutor,
    settings: TimelineSettings,
    events: list[StoreEvent],
) -> TimelineStore:
    """Provide a flat-partitioned store backed by the in-memory executor."""
    return TimelineStore(executor, settings=settings, on_event=events.append)


@pytest.fixture
def monthly_settings(settings: TimelineSettings) -> TimelineSettings:
    """Provide settings selecting the monthly partition scheme."""
    return TimelineSettings(
        **{**settings.model_dump(), "partition_scheme": PartitionSchemeType.monthly}
    )
