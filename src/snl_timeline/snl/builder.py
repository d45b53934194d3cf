"""SNL command construction.

Commands are three-line texts::

    set(structure)
    values("2024_03_15_1030_timeline_1", {"action": "login"})
    on(timeline.jane_example_com.entries)

Everything here is pure: no I/O and no state, so every command the store
issues can be asserted on directly in tests.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from snl_timeline.models.enums import SNLKind, SNLOperation
from snl_timeline.snl.exceptions import SNLCommandError

__all__ = [
    "PATH_SEPARATOR",
    "SNLCommand",
    "build_command",
    "build_path",
    "validate_command_syntax",
]

PATH_SEPARATOR = "."

_HEADER = re.compile(
    r"^(?P<operation>[a-z]+)\((?P<kind>[a-z]+)\)$",
)


def build_path(*segments: str) -> str:
    """Join path segments with the path separator.

    Raises:
        SNLCommandError: If there are no segments, or a segment is empty or
            contains the path separator.

    """
    if not segments:
        raise SNLCommandError("Command path needs at least one segment")
    for segment in segments:
        if not isinstance(segment, str) or not segment:
            raise SNLCommandError(
                f"Command path segments must be non-empty strings, got {segments!r}"
            )
        if PATH_SEPARATOR in segment:
            raise SNLCommandError(
                f"Command path segment '{segment}' contains the path separator"
            )
    return PATH_SEPARATOR.join(segments)


def _encode_values(values: str | tuple[str, Any] | list[Any]) -> str:
    if isinstance(values, str):
        return json.dumps(values, ensure_ascii=False)
    if isinstance(values, (tuple, list)) and len(values) == 2:
        key, payload = values
        if not isinstance(key, str) or not key:
            raise SNLCommandError("The key of a [key, payload] pair must be a non-empty string")
        try:
            encoded_payload = json.dumps(payload, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise SNLCommandError(f"Payload for '{key}' is not JSON serializable: {e}") from e
        return f"{json.dumps(key, ensure_ascii=False)}, {encoded_payload}"
    raise SNLCommandError(
        "Command values must be a key/pattern string or a [key, payload] pair"
    )


@dataclass(frozen=True)
class SNLCommand:
    """A single SNL command.

    Attributes:
        operation: What to do.
        kind: Storage object kind the command addresses.
        path: Path segments (database, namespace, entity[, key]).
        values: None, a key/pattern, or a (key, payload) pair.

    """

    operation: SNLOperation
    kind: SNLKind
    path: tuple[str, ...]
    values: str | tuple[str, Any] | None = None

    def render(self) -> str:
        """Render the command text."""
        lines = [f"{self.operation.value}({self.kind.value})"]
        if self.values is not None:
            lines.append(f"values({_encode_values(self.values)})")
        lines.append(f"on({build_path(*self.path)})")
        return "\n".join(lines)


def build_command(
    operation: SNLOperation | str,
    kind: SNLKind | str,
    values: str | tuple[str, Any] | list[Any] | None,
    path: list[str] | tuple[str, ...],
) -> str:
    """Build an SNL command string.

    Args:
        operation: One of set, view, list, search, remove, tag, untag.
        kind: Storage object kind, normally "structure".
        values: None, a key or wildcard pattern, or a [key, payload] pair.
        path: Ordered path segments.

    Returns:
        The command text.

    Raises:
        SNLCommandError: On an unknown operation or kind, an empty path
            segment, or values of an unsupported shape.

    """
    try:
        op = SNLOperation(operation)
    except ValueError as e:
        raise SNLCommandError(f"Invalid command: {operation}") from e
    try:
        obj_kind = SNLKind(kind)
    except ValueError as e:
        raise SNLCommandError(f"Invalid entity type: {kind}") from e

    if isinstance(values, list):
        values = tuple(values)  # type: ignore[assignment]
    return SNLCommand(op, obj_kind, tuple(path), values).render()  # type: ignore[arg-type]


def validate_command_syntax(command: str) -> None:
    """Check the shape of an SNL command text.

    Raises:
        SNLCommandError: If the command is empty, its header is not
            ``<operation>(<kind>)`` with a known operation and kind, or the
            ``on(...)`` clause is missing.

    """
    lines = [line.strip() for line in command.splitlines() if line.strip()]
    if not lines:
        raise SNLCommandError("Empty SNL command")

    match = _HEADER.match(lines[0])
    if match is None:
        raise SNLCommandError(f"Invalid SNL command format: {lines[0]}")
    try:
        SNLOperation(match["operation"])
        SNLKind(match["kind"])
    except ValueError as e:
        raise SNLCommandError(f"Invalid SNL command format: {lines[0]}") from e

    if not any(line.startswith("on(") and line.endswith(")") for line in lines[1:]):
        raise SNLCommandError("Missing on() clause")
