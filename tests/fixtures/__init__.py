"""Test fixtures for snl-timeline tests.

This package provides an in-memory SNL executor that interprets the
command text the TimelineStore issues, so tests can assert both on the
exact commands and on the resulting store contents.
"""

import json
import re
from fnmatch import fnmatchcase
from typing import Any

from snl_timeline.snl.builder import PATH_SEPARATOR, validate_command_syntax

__all__ = [
    "ENTRIES_PATH",
    "NAMESPACE",
    "TOKEN",
    "USER_EMAIL",
    "InMemorySNLExecutor",
    "ParsedCommand",
]

USER_EMAIL = "jane@example.com"
NAMESPACE = "jane_example_com"
TOKEN = "test-token"
ENTRIES_PATH = f"timeline.{NAMESPACE}.entries"

_HEADER = re.compile(r"^(?P<operation>[a-z]+)\((?P<kind>[a-z]+)\)$")


class ParsedCommand:
    """The pieces of one SNL command text."""

    def __init__(self, text: str) -> None:
        validate_command_syntax(text)
        lines = text.split("\n")
        match = _HEADER.match(lines[0])
        assert match is not None
        self.text = text
        self.operation = match["operation"]
        self.kind = match["kind"]
        self.values: list[Any] = []
        self.path: list[str] = []
        for line in lines[1:]:
            if line.startswith("values(") and line.endswith(")"):
                self.values = json.loads(f"[{line[len('values('):-1]}]")
            elif line.startswith("on(") and line.endswith(")"):
                self.path = line[len("on(") : -1].split(PATH_SEPARATOR)

    @property
    def target(self) -> str:
        return PATH_SEPARATOR.join(self.path)


class InMemorySNLExecutor:
    """Fake key/value store answering SNL commands from memory.

    Entities are addressed by their ``database.namespace.entity`` path and
    hold key to payload mappings. Payloads are copied through JSON on the
    way in and out, like they would be on the wire.

    Attributes:
        entities: Stored payloads by entity path, then key.
        store_tags: Store-side tags by full ``entity.key`` path.
        commands: Every command text received, in order.
        tokens: The token passed with each command.
        missing_entities_raise: Reading an unknown entity raises instead of
            answering with an empty mapping.

    """

    def __init__(self, missing_entities_raise: bool = False) -> None:
        self.entities: dict[str, dict[str, dict[str, Any]]] = {}
        self.store_tags: dict[str, list[str]] = {}
        self.commands: list[str] = []
        self.tokens: list[str] = []
        self.missing_entities_raise = missing_entities_raise
        self._failures: list[tuple[str, BaseException]] = []

    # Test helpers

    def fail_on(self, fragment: str, error: BaseException | None = None) -> None:
        """Raise error for every command whose text contains fragment."""
        self._failures.append((fragment, error or ConnectionError("store unavailable")))

    def clear_failures(self) -> None:
        self._failures.clear()

    def seed(self, entity_path: str, key: str, payload: dict[str, Any]) -> None:
        """Store a payload directly, bypassing the command interface."""
        self.entities.setdefault(entity_path, {})[key] = json.loads(json.dumps(payload))

    def keys(self, entity_path: str) -> list[str]:
        return list(self.entities.get(entity_path, {}))

    def parsed(self) -> list[ParsedCommand]:
        return [ParsedCommand(text) for text in self.commands]

    def operations(self) -> list[str]:
        return [command.operation for command in self.parsed()]

    # Executor interface

    async def execute(self, command: str, token: str) -> Any:
        self.commands.append(command)
        self.tokens.append(token)
        for fragment, error in self._failures:
            if fragment in command:
                raise error

        parsed = ParsedCommand(command)
        handler = getattr(self, f"_do_{parsed.operation}")
        return handler(parsed)

    def _entity(self, parsed: ParsedCommand) -> dict[str, dict[str, Any]]:
        entity = self.entities.get(parsed.target)
        if entity is None:
            if self.missing_entities_raise:
                raise LookupError(f"Entity not found: {parsed.target}")
            return {}
        return entity

    @staticmethod
    def _copy(records: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
        return json.loads(json.dumps(records))

    def _do_set(self, parsed: ParsedCommand) -> dict[str, Any]:
        key, payload = parsed.values
        self.seed(parsed.target, key, payload)
        return {"status": "ok"}

    def _do_list(self, parsed: ParsedCommand) -> Any:
        if len(parsed.path) == 2:
            prefix = parsed.target + PATH_SEPARATOR
            return [
                path[len(prefix) :]
                for path in self.entities
                if path.startswith(prefix) and PATH_SEPARATOR not in path[len(prefix) :]
            ]
        pattern = parsed.values[0]
        entity = self._entity(parsed)
        return self._copy({k: v for k, v in entity.items() if fnmatchcase(k, pattern)})

    def _do_view(self, parsed: ParsedCommand) -> Any:
        return self._do_list(parsed)

    def _do_search(self, parsed: ParsedCommand) -> Any:
        term = parsed.values[0].lower()
        entity = self._entity(parsed)
        return self._copy(
            {k: v for k, v in entity.items() if term in json.dumps(v).lower()}
        )

    def _do_remove(self, parsed: ParsedCommand) -> dict[str, Any]:
        key = parsed.values[0]
        entity = self._entity(parsed)
        if key not in entity:
            raise LookupError(f"Key not found: {parsed.target}.{key}")
        del entity[key]
        return {"status": "ok"}

    def _tagged_path(self, parsed: ParsedCommand) -> str:
        *entity_path, key = parsed.path
        entity = self.entities.get(PATH_SEPARATOR.join(entity_path), {})
        if key not in entity:
            raise LookupError(f"Key not found: {parsed.target}")
        return parsed.target

    def _do_tag(self, parsed: ParsedCommand) -> dict[str, Any]:
        tags = self.store_tags.setdefault(self._tagged_path(parsed), [])
        if parsed.values[0] not in tags:
            tags.append(parsed.values[0])
        return {"status": "ok"}

    def _do_untag(self, parsed: ParsedCommand) -> dict[str, Any]:
        tags = self.store_tags.get(self._tagged_path(parsed), [])
        if parsed.values[0] in tags:
            tags.remove(parsed.values[0])
        return {"status": "ok"}
