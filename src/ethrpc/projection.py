"""
Result projection: render any JSON-RPC result as text.

Nodes disagree on whether scalar fields come back quoted, so callers that
expect a string get one regardless of the JSON type the node returned.
"""

from __future__ import annotations

import json
from typing import Any, Union

JsonValue = Union[str, int, float, bool, None, dict[str, Any], list[Any]]


def to_compact_json(value: JsonValue) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def project_to_string(value: JsonValue) -> str:
    """
    Project a JSON value to a string.

    Strings pass through unchanged; every other value becomes compact JSON
    text with no indentation and no trailing newline.

    Args:
        value: Decoded JSON value (``result`` field of a response)

    Returns:
        The string itself, or its compact JSON encoding
    """
    match value:
        case str():
            return value
        case None | bool() | int() | float():
            return to_compact_json(value)
        case dict() | list() | tuple():
            return to_compact_json(value)
        case _:
            raise TypeError(f"Not a JSON value: {type(value).__name__}")
