"""Integration tests for the monthly partition scheme.

The monthly layout stores each month in its own YYYY-MM entity, so
reads fan out over buckets. These tests run a TimelineStore with that
scheme against an executor that fails on unknown entities, the way a
real store answers reads of buckets that were never written.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest
from fixtures import NAMESPACE, TOKEN, USER_EMAIL, InMemorySNLExecutor

from snl_timeline.config.settings import TimelineSettings
from snl_timeline.models.events import StoreEvent, StoreEventType
from snl_timeline.models.query import TimelineQuery
from snl_timeline.models.timeline_entry import TimelineEntry
from snl_timeline.timeline.exceptions import StoreError
from snl_timeline.timeline.store import TimelineStore

EntryFactory = Callable[..., TimelineEntry]

BUCKETS = f"timeline.{NAMESPACE}"


def utc(*args: int) -> datetime:
    """Build a UTC timestamp."""
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def strict_executor() -> InMemorySNLExecutor:
    """Provide an executor that raises on reads of unknown entities."""
    return InMemorySNLExecutor(missing_entities_raise=True)


@pytest.fixture
def monthly_events() -> list[StoreEvent]:
    """Collect the events the monthly store emits."""
    return []


@pytest.fixture
def monthly_store(
    strict_executor: InMemorySNLExecutor,
    monthly_settings: TimelineSettings,
    monthly_events: list[StoreEvent],
) -> TimelineStore:
    """Provide a monthly-partitioned store on the strict executor."""
    return TimelineStore(
        strict_executor, settings=monthly_settings, on_event=monthly_events.append
    )


@pytest.fixture
def populate(
    monthly_store: TimelineStore,
    strict_executor: InMemorySNLExecutor,
    monthly_events: list[StoreEvent],
    make_entry: EntryFactory,
) -> Callable[[], object]:
    """Provide a coroutine function writing entries into three month buckets.

    Command and event recorders are reset afterwards so tests only see
    what their own reads issue.
    """

    async def _populate() -> None:
        for entry in (
            make_entry(id="dec", created_at=utc(2023, 12, 30, 8, 0)),
            make_entry(id="feb", created_at=utc(2024, 2, 29, 8, 0)),
            make_entry(id="mar14", created_at=utc(2024, 3, 14, 8, 0)),
            make_entry(id="mar15", created_at=utc(2024, 3, 15, 8, 0)),
        ):
            await monthly_store.add(entry, token=TOKEN)
        strict_executor.commands.clear()
        monthly_events.clear()

    return _populate


class TestMonthlyWrites:
    """Tests for where the monthly scheme writes."""

    @pytest.mark.asyncio
    async def test_entries_stored_by_id_in_month_bucket(
        self, populate: Callable, strict_executor: InMemorySNLExecutor
    ) -> None:
        """Test that each entry lands in its YYYY-MM bucket under its id."""
        await populate()

        assert strict_executor.keys(f"{BUCKETS}.2024-03") == ["mar14", "mar15"]
        assert strict_executor.keys(f"{BUCKETS}.2024-02") == ["feb"]
        assert strict_executor.keys(f"{BUCKETS}.2023-12") == ["dec"]


class TestMonthlyReads:
    """Tests for reads fanning out over month buckets."""

    @pytest.mark.asyncio
    async def test_day_filters_month_bucket(
        self,
        populate: Callable,
        monthly_store: TimelineStore,
        strict_executor: InMemorySNLExecutor,
    ) -> None:
        """Test that a day query scans its month and filters client-side."""
        await populate()

        result = await monthly_store.list(
            USER_EMAIL, TimelineQuery(year=2024, month=3, day=15), token=TOKEN
        )

        assert [e.id for e in result] == ["mar15"]
        assert strict_executor.commands == [
            f'list(structure)\nvalues("*")\non({BUCKETS}.2024-03)'
        ]

    @pytest.mark.asyncio
    async def test_year_skips_missing_buckets(
        self,
        populate: Callable,
        monthly_store: TimelineStore,
        strict_executor: InMemorySNLExecutor,
        monthly_events: list[StoreEvent],
    ) -> None:
        """Test that a year scan tolerates months that were never written."""
        await populate()

        result = await monthly_store.list(USER_EMAIL, TimelineQuery(year=2024), token=TOKEN)

        assert [e.id for e in result] == ["mar15", "mar14", "feb"]
        assert len(strict_executor.commands) == 12
        skipped = [
            e.data["entity"]
            for e in monthly_events
            if e.event_type == StoreEventType.BUCKET_SKIPPED
        ]
        assert len(skipped) == 10
        assert "2024-03" not in skipped

    @pytest.mark.asyncio
    async def test_missing_month_raises(
        self, populate: Callable, monthly_store: TimelineStore
    ) -> None:
        """Test that a single-month scan does not hide store failures."""
        await populate()

        with pytest.raises(StoreError):
            await monthly_store.list(
                USER_EMAIL, TimelineQuery(year=2024, month=5), token=TOKEN
            )

    @pytest.mark.asyncio
    async def test_unrestricted_listing_enumerates_buckets(
        self,
        populate: Callable,
        monthly_store: TimelineStore,
        strict_executor: InMemorySNLExecutor,
    ) -> None:
        """Test that listing everything enumerates buckets newest first."""
        await populate()
        strict_executor.seed(f"{BUCKETS}.settings", "theme", {"color": "dark"})

        result = await monthly_store.list(USER_EMAIL, token=TOKEN)

        assert [e.id for e in result] == ["mar15", "mar14", "feb", "dec"]
        targets = [command.target for command in strict_executor.parsed()]
        assert targets == [
            BUCKETS,
            f"{BUCKETS}.2024-03",
            f"{BUCKETS}.2024-02",
            f"{BUCKETS}.2023-12",
        ]

    @pytest.mark.asyncio
    async def test_get_searches_buckets(
        self,
        populate: Callable,
        monthly_store: TimelineStore,
        strict_executor: InMemorySNLExecutor,
    ) -> None:
        """Test that a lookup by id stops at the bucket holding it."""
        await populate()

        found = await monthly_store.get(USER_EMAIL, "feb", token=TOKEN)

        assert found is not None
        assert found.created_at == utc(2024, 2, 29, 8, 0)
        assert strict_executor.operations() == ["list", "view", "view"]

    @pytest.mark.asyncio
    async def test_store_side_search_falls_back_to_scan(
        self,
        strict_executor: InMemorySNLExecutor,
        monthly_settings: TimelineSettings,
        make_entry: EntryFactory,
    ) -> None:
        """Test that the monthly layout always searches by scanning."""
        store = TimelineStore(
            strict_executor,
            settings=monthly_settings.model_copy(update={"store_side_search": True}),
        )
        await store.add(make_entry(action="deploy"), token=TOKEN)

        result = await store.search(
            USER_EMAIL, "deploy", TimelineQuery(year=2024, month=3), token=TOKEN
        )

        assert [e.id for e in result] == ["timeline_1"]
        assert "search" not in strict_executor.operations()


class TestMonthlyMaintenance:
    """Tests for removal and purges across buckets."""

    @pytest.mark.asyncio
    async def test_remove_deletes_from_bucket(
        self,
        populate: Callable,
        monthly_store: TimelineStore,
        strict_executor: InMemorySNLExecutor,
    ) -> None:
        """Test that remove deletes the bare id from the month bucket."""
        await populate()

        await monthly_store.remove(USER_EMAIL, "mar14", token=TOKEN)

        assert strict_executor.commands[-1] == (
            f'remove(structure)\nvalues("mar14")\non({BUCKETS}.2024-03)'
        )
        assert strict_executor.keys(f"{BUCKETS}.2024-03") == ["mar15"]

    @pytest.mark.asyncio
    async def test_purge_across_buckets(
        self,
        populate: Callable,
        monthly_store: TimelineStore,
        strict_executor: InMemorySNLExecutor,
    ) -> None:
        """Test that purges reach every bucket."""
        await populate()

        deleted = await monthly_store.purge_older_than(
            USER_EMAIL,
            timedelta(days=10),
            token=TOKEN,
            now=utc(2024, 3, 20, 0, 0),
        )

        assert deleted == 2
        assert strict_executor.keys(f"{BUCKETS}.2023-12") == []
        assert strict_executor.keys(f"{BUCKETS}.2024-02") == []
        assert strict_executor.keys(f"{BUCKETS}.2024-03") == ["mar14", "mar15"]
