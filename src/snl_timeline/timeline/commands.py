"""SNL commands issued by the timeline store.

Every path starts with the configured database and the user's namespace;
entries live one level below in an entity chosen by the partition scheme.
"""

from __future__ import annotations

from typing import Any

from snl_timeline.models.enums import SNLKind, SNLOperation
from snl_timeline.snl.builder import build_command
from snl_timeline.timeline.partition import WILDCARD, ScanTarget

__all__ = ["TimelineCommands"]


class TimelineCommands:
    """Builds the timeline's SNL commands for one database.

    Attributes:
        database: First segment of every path.
        kind: Storage object kind of timeline entries.

    """

    def __init__(self, database: str, kind: SNLKind = SNLKind.structure) -> None:
        """Initialize the command set.

        Args:
            database: First segment of every path.
            kind: Storage object kind of timeline entries.

        """
        self.database = database
        self.kind = kind

    def put(self, namespace: str, entity: str, key: str, payload: dict[str, Any]) -> str:
        """Write (or overwrite) one entry."""
        return build_command(
            SNLOperation.set, self.kind, (key, payload), [self.database, namespace, entity]
        )

    def scan(self, namespace: str, target: ScanTarget) -> str:
        """List every entry of an entity whose key matches the target pattern."""
        return build_command(
            SNLOperation.list,
            self.kind,
            target.pattern,
            [self.database, namespace, target.entity],
        )

    def lookup(self, namespace: str, target: ScanTarget) -> str:
        """View the entries whose key matches the target pattern."""
        return build_command(
            SNLOperation.view,
            self.kind,
            target.pattern,
            [self.database, namespace, target.entity],
        )

    def search(self, namespace: str, entity: str, term: str) -> str:
        """Ask the store for entries containing a term."""
        return build_command(
            SNLOperation.search, self.kind, term, [self.database, namespace, entity]
        )

    def delete(self, namespace: str, entity: str, key: str) -> str:
        """Remove one entry."""
        return build_command(
            SNLOperation.remove, self.kind, key, [self.database, namespace, entity]
        )

    def tag(self, namespace: str, entity: str, key: str, tag: str) -> str:
        """Attach a store-side tag to one entry."""
        return build_command(
            SNLOperation.tag, self.kind, tag, [self.database, namespace, entity, key]
        )

    def untag(self, namespace: str, entity: str, key: str, tag: str) -> str:
        """Detach a store-side tag from one entry."""
        return build_command(
            SNLOperation.untag, self.kind, tag, [self.database, namespace, entity, key]
        )

    def list_buckets(self, namespace: str) -> str:
        """Enumerate the entities in a user's namespace."""
        return build_command(
            SNLOperation.list, self.kind, WILDCARD, [self.database, namespace]
        )
