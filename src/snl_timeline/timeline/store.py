"""Timeline store - reads and writes one user's timeline through SNL.

This module provides the TimelineStore class which turns timeline
operations into SNL commands, hands them to an external command executor,
and decodes the responses into TimelineEntry objects.

Known scaling boundary: the store has no index of its own. Search, purge
and unrestricted listings read every candidate entry of the user and filter
in memory.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from snl_timeline.config.settings import get_settings
from snl_timeline.exceptions import SNLTimelineError
from snl_timeline.logging_config import get_logger
from snl_timeline.models.events import StoreEvent, StoreEventType
from snl_timeline.models.exceptions import ValidationError
from snl_timeline.models.query import TimelineQuery
from snl_timeline.models.statistics import TimelineStatistics
from snl_timeline.models.timeline_entry import RESERVED_ID_CHARACTERS, TimelineEntry
from snl_timeline.snl.namespace import NamespaceCodec, to_namespace, validate_namespace
from snl_timeline.snl.parser import parse_items, parse_keys
from snl_timeline.timeline.commands import TimelineCommands
from snl_timeline.timeline.exceptions import MalformedKeyError, NotFoundError, StoreError
from snl_timeline.timeline.partition import PartitionScheme, ScanTarget, create_scheme
from snl_timeline.timeline.ranking import rank_by_relevance
from snl_timeline.timeline.statistics import summarize

if TYPE_CHECKING:
    from snl_timeline.config.settings import TimelineSettings
    from snl_timeline.snl.executor import CommandExecutor

__all__ = ["TimelineStore"]

logger = get_logger(__name__)

_ENTRY = "Timeline entry"


def _paginate(entries: list[TimelineEntry], page: int, limit: int) -> list[TimelineEntry]:
    start = (page - 1) * limit
    return entries[start : start + limit]


class TimelineStore:
    """Per-user timeline storage on top of an SNL command executor.

    The store holds no mutable state besides the observability hook; every
    call derives the namespace from the user email, builds its commands,
    and passes the caller's token to the executor. Writes are single
    commands, so concurrent calls on the same entry are last-writer-wins.

    Attributes:
        settings: The timeline settings in use.
        scheme: The partition scheme used on every read and write path.

    Example:
        async with TimelineStore(executor, on_event=events.append) as store:
            await store.add(entry, token=token)
            march = await store.list(
                "jane@example.com", TimelineQuery(year=2024, month=3), token=token
            )

    """

    def __init__(
        self,
        executor: CommandExecutor,
        *,
        settings: TimelineSettings | None = None,
        scheme: PartitionScheme | None = None,
        namespace_codec: NamespaceCodec = to_namespace,
        on_event: Callable[[StoreEvent], None] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            executor: Runs SNL commands against the key/value store.
            settings: Timeline settings. If not provided, uses get_settings().
            scheme: Partition scheme. If not provided, built from the settings.
            namespace_codec: Derives a namespace from a user email.
            on_event: Optional callback receiving store events.

        """
        self._executor = executor
        self._settings = settings or get_settings().timeline
        self._scheme = scheme or create_scheme(self._settings)
        self._namespace_codec = namespace_codec
        self._on_event = on_event
        self._commands = TimelineCommands(self._settings.database)

    @property
    def settings(self) -> TimelineSettings:
        """Get the timeline settings."""
        return self._settings

    @property
    def scheme(self) -> PartitionScheme:
        """Get the partition scheme."""
        return self._scheme

    async def __aenter__(self) -> TimelineStore:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Detach the observability hook."""
        self._on_event = None
        logger.debug("timeline_store_closed")

    # Public operations

    async def add(self, entry: TimelineEntry, *, token: str) -> TimelineEntry:
        """Persist a new entry under its partition key.

        Args:
            entry: The entry to store.
            token: Credential passed to the executor.

        Returns:
            The same entry, unchanged.

        Raises:
            ValidationError: If the entry is invalid; nothing is written.
            NamespaceError: If the user email cannot be normalized.
            StoreError: If the executor fails.

        """
        self._check_entry(entry)
        namespace = self._namespace(entry.user_email)
        entity = self._scheme.entity_for(entry)
        key = self._scheme.key_for(entry)

        await self._execute(
            "add", self._commands.put(namespace, entity, key, entry.to_storage()), token
        )

        logger.info(
            "timeline_entry_added",
            namespace=namespace,
            entity=entity,
            key=key,
            category=entry.category.value,
        )
        self._emit(
            StoreEventType.ENTRY_ADDED,
            f"Added {entry.id}",
            namespace=namespace,
            entity=entity,
            key=key,
        )
        return entry

    async def get(
        self, user_email: str, entry_id: str, *, token: str
    ) -> TimelineEntry | None:
        """Fetch an entry by id.

        Returns:
            The entry, or None if the user has no entry with exactly this id.

        """
        self._check_entry_id(entry_id)
        namespace = self._namespace(user_email)
        found = await self._locate(namespace, entry_id, token, "get")
        return found[2] if found else None

    async def update(self, entry: TimelineEntry, *, token: str) -> TimelineEntry:
        """Overwrite a stored entry with a new full version.

        Raises:
            ValidationError: If the entry is invalid or its created_at differs
                from the stored one.
            NotFoundError: If the entry was never stored.
            StoreError: If the executor fails.

        """
        self._check_entry(entry)
        namespace = self._namespace(entry.user_email)
        found = await self._locate(namespace, entry.id, token, "update")
        if found is None:
            raise NotFoundError(_ENTRY, entry.id)

        entity, key, existing = found
        if existing.created_at != entry.created_at:
            raise ValidationError(
                f"created_at of timeline entry {entry.id} cannot change",
                errors=["created_at is immutable"],
            )

        await self._execute(
            "update", self._commands.put(namespace, entity, key, entry.to_storage()), token
        )

        logger.info("timeline_entry_updated", namespace=namespace, key=key)
        self._emit(
            StoreEventType.ENTRY_UPDATED,
            f"Updated {entry.id}",
            namespace=namespace,
            entity=entity,
            key=key,
        )
        return entry

    async def list(
        self,
        user_email: str,
        query: TimelineQuery | None = None,
        *,
        token: str,
    ) -> list[TimelineEntry]:
        """List entries, newest first.

        Scans the narrowest partition the query's calendar fields allow,
        applies every filter, sorts by created_at descending and only then
        cuts out the requested page.

        Raises:
            ValidationError: If the page size exceeds the configured maximum.
            NamespaceError: If the user email cannot be normalized.
            StoreError: If the executor fails.

        """
        query = query or TimelineQuery()
        limit = self._page_size(query)
        namespace = self._namespace(user_email)

        entries = [e for e in await self._scan(namespace, query, token, "list") if query.matches(e)]
        entries.sort(key=lambda e: e.created_at, reverse=True)
        return _paginate(entries, query.page, limit)

    async def search(
        self,
        user_email: str,
        term: str,
        query: TimelineQuery | None = None,
        *,
        token: str,
    ) -> list[TimelineEntry]:
        """Search entries by free text, most relevant first.

        Candidates come from a scan of the query's period, or from the
        store's search command when store_side_search is enabled and the
        partition scheme supports it. Zero-score candidates are kept.

        Raises:
            ValidationError: If the term is too short or the page too large.
            NamespaceError: If the user email cannot be normalized.
            StoreError: If the executor fails.

        """
        min_length = self._settings.search_min_term_length
        if not isinstance(term, str) or len(term.strip()) < min_length:
            raise ValidationError(
                f"Search term must be at least {min_length} characters",
                errors=["term is too short"],
            )
        term = term.strip()
        query = query or TimelineQuery()
        limit = self._page_size(query)
        namespace = self._namespace(user_email)

        entity = self._scheme.search_entity
        if self._settings.store_side_search and entity is not None:
            response = await self._execute(
                "search", self._commands.search(namespace, entity, term), token
            )
            candidates = self._decode_all(entity, response)
        else:
            candidates = await self._scan(namespace, query, token, "search")

        ranked = rank_by_relevance((e for e in candidates if query.matches(e)), term)
        logger.debug(
            "timeline_searched",
            namespace=namespace,
            candidates=len(candidates),
            matches=len(ranked),
        )
        return _paginate(ranked, query.page, limit)

    async def remove(self, user_email: str, entry_id: str, *, token: str) -> bool:
        """Delete an entry by id.

        Returns:
            True once the delete command has succeeded.

        Raises:
            NotFoundError: If the user has no entry with this id.
            StoreError: If the executor fails.

        """
        self._check_entry_id(entry_id)
        namespace = self._namespace(user_email)
        found = await self._locate(namespace, entry_id, token, "remove")
        if found is None:
            raise NotFoundError(_ENTRY, entry_id)

        entry = found[2]
        entity = self._scheme.entity_for(entry)
        key = self._scheme.key_for(entry)
        await self._execute("remove", self._commands.delete(namespace, entity, key), token)

        logger.info("timeline_entry_removed", namespace=namespace, key=key)
        self._emit(
            StoreEventType.ENTRY_REMOVED,
            f"Removed {entry_id}",
            namespace=namespace,
            entity=entity,
            key=key,
        )
        return True

    async def purge_older_than(
        self,
        user_email: str,
        retention: timedelta | None = None,
        *,
        token: str,
        now: datetime | None = None,
    ) -> int:
        """Delete entries older than the retention window.

        System-generated entries are never purged. Deletions are issued one
        at a time; a failed deletion is logged and skipped, and earlier
        deletions stay in place. Entries written while the purge runs may
        or may not be seen.

        Args:
            user_email: Whose timeline to purge.
            retention: Age beyond which entries are deleted. Defaults to
                the configured retention_days.
            token: Credential passed to the executor.
            now: Reference time (UTC). Defaults to the current time.

        Returns:
            Number of deletions the executor confirmed.

        Raises:
            ValidationError: If retention is negative.
            StoreError: If the initial scan fails.

        """
        if retention is None:
            retention = timedelta(days=self._settings.retention_days)
        if retention < timedelta(0):
            raise ValidationError(
                "Retention period must not be negative", errors=["retention < 0"]
            )
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        cutoff = now - retention

        namespace = self._namespace(user_email)
        entries = await self._scan(namespace, TimelineQuery(), token, "purge")

        deleted = 0
        skipped = 0
        for entry in entries:
            if entry.is_system_generated or entry.created_at >= cutoff:
                continue
            entity = self._scheme.entity_for(entry)
            key = self._scheme.key_for(entry)
            try:
                await self._execute(
                    "purge", self._commands.delete(namespace, entity, key), token
                )
            except SNLTimelineError as e:
                skipped += 1
                error = str(e.cause) if isinstance(e, StoreError) else str(e)
                logger.warning(
                    "timeline_purge_delete_failed", namespace=namespace, key=key, error=error
                )
                self._emit(
                    StoreEventType.PURGE_SKIPPED,
                    f"Could not delete {entry.id}",
                    namespace=namespace,
                    key=key,
                    error=error,
                )
                continue
            deleted += 1

        logger.info(
            "timeline_purged",
            namespace=namespace,
            cutoff=cutoff.isoformat(),
            deleted=deleted,
            failed=skipped,
        )
        self._emit(
            StoreEventType.PURGE_COMPLETED,
            f"Purged {deleted} entries",
            namespace=namespace,
            deleted=deleted,
            failed=skipped,
        )
        return deleted

    async def tag_entry(
        self, user_email: str, entry_id: str, tag: str, *, token: str
    ) -> bool:
        """Attach a store-side tag to an entry.

        The entry's own tags field is not touched; update the entry to
        change it.

        Raises:
            ValidationError: If the tag is blank.
            NotFoundError: If the user has no entry with this id.
            StoreError: If the executor fails.

        """
        return await self._retag(user_email, entry_id, tag, token, untag=False)

    async def untag_entry(
        self, user_email: str, entry_id: str, tag: str, *, token: str
    ) -> bool:
        """Detach a store-side tag from an entry.

        Raises:
            ValidationError: If the tag is blank.
            NotFoundError: If the user has no entry with this id.
            StoreError: If the executor fails.

        """
        return await self._retag(user_email, entry_id, tag, token, untag=True)

    async def recent(
        self, user_email: str, limit: int | None = None, *, token: str
    ) -> list[TimelineEntry]:
        """Newest entries of a user, at most limit (default recent_limit)."""
        query = TimelineQuery.create(
            limit=limit if limit is not None else self._settings.recent_limit
        )
        return await self.list(user_email, query, token=token)

    async def statistics(
        self,
        user_email: str,
        query: TimelineQuery | None = None,
        *,
        token: str,
    ) -> TimelineStatistics:
        """Summarize every entry matching the query's filters (paging ignored)."""
        query = query or TimelineQuery()
        namespace = self._namespace(user_email)
        entries = [e for e in await self._scan(namespace, query, token, "statistics") if query.matches(e)]
        return summarize(entries)

    # Internals

    def _namespace(self, user_email: str) -> str:
        return validate_namespace(self._namespace_codec(user_email))

    def _page_size(self, query: TimelineQuery) -> int:
        limit = query.limit or self._settings.default_page_size
        if limit > self._settings.max_page_size:
            raise ValidationError(
                f"Page size {limit} exceeds the maximum of {self._settings.max_page_size}",
                errors=["limit too large"],
            )
        return limit

    @staticmethod
    def _check_entry(entry: Any) -> None:
        if not isinstance(entry, TimelineEntry):
            raise ValidationError("Invalid timeline entry", errors=["not a TimelineEntry"])
        entry.validate_entry()

    @staticmethod
    def _check_entry_id(entry_id: Any) -> None:
        if not isinstance(entry_id, str) or not entry_id.strip():
            raise ValidationError("Entry id is required", errors=["entry_id is empty"])
        if any(c in entry_id for c in RESERVED_ID_CHARACTERS):
            raise ValidationError(
                f"Entry id '{entry_id}' must not contain any of {RESERVED_ID_CHARACTERS!r}",
                errors=["entry_id has reserved characters"],
            )

    def _emit(self, event_type: StoreEventType, message: str, **data: Any) -> None:
        if self._on_event is not None:
            self._on_event(StoreEvent(event_type=event_type, message=message, data=data))

    async def _execute(self, operation: str, command: str, token: str) -> Any:
        """Run one command, wrapping executor failures in StoreError."""
        header = command.split("\n", 1)[0]
        logger.debug("snl_command_issued", operation=operation, command=header)
        self._emit(
            StoreEventType.COMMAND_ISSUED, header, operation=operation, command=command
        )
        try:
            return await self._executor.execute(command, token)
        except Exception as e:
            self._emit(
                StoreEventType.COMMAND_FAILED,
                f"{header} failed",
                operation=operation,
                error=str(e),
            )
            if isinstance(e, SNLTimelineError):
                raise
            raise StoreError(operation, e) from e

    def _decode(self, entity: str, key: str, record: dict[str, Any]) -> TimelineEntry:
        if not record.get("id"):
            record = {**record, "id": self._scheme.entry_id_for(entity, key)}
        return TimelineEntry.from_storage(record)

    def _decode_all(self, entity: str, response: Any) -> list[TimelineEntry]:
        return [self._decode(entity, key, record) for key, record in parse_items(response)]

    async def _list_buckets(self, namespace: str, token: str, operation: str) -> list[str]:
        response = await self._execute(
            operation, self._commands.list_buckets(namespace), token
        )
        return parse_keys(response)

    async def _targets(
        self,
        planned: list[ScanTarget] | None,
        namespace: str,
        token: str,
        operation: str,
        pattern: str | None = None,
    ) -> list[ScanTarget]:
        if planned is not None:
            return planned
        buckets = await self._list_buckets(namespace, token, operation)
        if pattern is None:
            return self._scheme.bucket_targets(buckets)
        return self._scheme.bucket_targets(buckets, pattern)

    async def _scan(
        self, namespace: str, query: TimelineQuery, token: str, operation: str
    ) -> list[TimelineEntry]:
        """Fetch the candidates of a query's period (unfiltered, unsorted)."""
        planned = self._scheme.scan_targets(query.year, query.month, query.day)
        targets = await self._targets(planned, namespace, token, operation)

        entries: list[TimelineEntry] = []
        for target in targets:
            try:
                response = await self._execute(
                    operation, self._commands.scan(namespace, target), token
                )
            except StoreError as e:
                if not target.optional:
                    raise
                logger.info(
                    "timeline_bucket_skipped",
                    namespace=namespace,
                    entity=target.entity,
                    error=str(e.cause),
                )
                self._emit(
                    StoreEventType.BUCKET_SKIPPED,
                    f"Skipped bucket {target.entity}",
                    namespace=namespace,
                    entity=target.entity,
                )
                continue
            entries.extend(self._decode_all(target.entity, response))
        return entries

    async def _locate(
        self, namespace: str, entry_id: str, token: str, operation: str
    ) -> tuple[str, str, TimelineEntry] | None:
        """Find the entity, key and entry for an exact entry id."""
        targets = await self._targets(
            self._scheme.lookup_targets(entry_id),
            namespace,
            token,
            operation,
            pattern=self._scheme.lookup_pattern(entry_id),
        )
        for target in targets:
            response = await self._execute(
                operation, self._commands.lookup(namespace, target), token
            )
            for key, record in parse_items(response):
                try:
                    found_id = self._scheme.entry_id_for(target.entity, key)
                except MalformedKeyError:
                    logger.warning("timeline_key_malformed", entity=target.entity, key=key)
                    continue
                # Patterns also match ids that merely end with entry_id
                if found_id != entry_id:
                    continue
                return target.entity, key, self._decode(target.entity, key, record)
        return None

    async def _retag(
        self, user_email: str, entry_id: str, tag: str, token: str, *, untag: bool
    ) -> bool:
        if not isinstance(tag, str) or not tag.strip():
            raise ValidationError("Tag is required", errors=["tag is empty"])
        self._check_entry_id(entry_id)
        operation = "untag" if untag else "tag"
        namespace = self._namespace(user_email)
        found = await self._locate(namespace, entry_id, token, operation)
        if found is None:
            raise NotFoundError(_ENTRY, entry_id)

        entity, key, _ = found
        build = self._commands.untag if untag else self._commands.tag
        await self._execute(operation, build(namespace, entity, key, tag.strip()), token)

        event_type = StoreEventType.ENTRY_UNTAGGED if untag else StoreEventType.ENTRY_TAGGED
        logger.info(
            f"timeline_{event_type.value}", namespace=namespace, key=key, tag=tag.strip()
        )
        self._emit(
            event_type,
            f"{operation} {entry_id}: {tag.strip()}",
            namespace=namespace,
            key=key,
            tag=tag.strip(),
        )
        return True
