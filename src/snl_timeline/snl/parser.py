"""SNL response decoding.

The store answers with a mapping of key to payload, or with nothing at
all. An absent, empty or non-object response is the defined "no results"
case and never an error.
"""

from __future__ import annotations

import json
from typing import Any

__all__ = [
    "decode_response",
    "parse_items",
    "parse_keys",
    "parse_record",
    "parse_records",
]

ID_FIELD = "id"


def decode_response(raw: Any) -> Any:
    """Decode JSON text responses; pass every other value through.

    Text that is not valid JSON decodes to None (no results).
    """
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            return json.loads(raw)
        except ValueError:
            return None
    return raw


def parse_items(raw: Any) -> list[tuple[str, dict[str, Any]]]:
    """Extract the (key, record) pairs of a response, in response order.

    Payloads that are not objects are skipped.
    """
    data = decode_response(raw)
    if not isinstance(data, dict):
        return []
    return [
        (str(key), value) for key, value in data.items() if isinstance(value, dict)
    ]


def _with_id(key: str, record: dict[str, Any]) -> dict[str, Any]:
    if record.get(ID_FIELD):
        return dict(record)
    return {**record, ID_FIELD: key}


def parse_record(raw: Any) -> dict[str, Any] | None:
    """Decode the first record of a response, or None when there is none.

    The storage key is attached as "id" when the record carries no id.
    """
    items = parse_items(raw)
    if not items:
        return None
    key, record = items[0]
    return _with_id(key, record)


def parse_records(raw: Any) -> list[dict[str, Any]]:
    """Decode every record of a response, attaching keys as ids where missing."""
    return [_with_id(key, record) for key, record in parse_items(raw)]


def parse_keys(raw: Any) -> list[str]:
    """Decode the keys of an enumeration response.

    Mapping responses yield their keys; list responses yield their string
    items.
    """
    data = decode_response(raw)
    if isinstance(data, dict):
        return [str(key) for key in data]
    if isinstance(data, list):
        return [item for item in data if isinstance(item, str)]
    return []
