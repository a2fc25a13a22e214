"""Best-effort accessors for loosely shaped input.

The transform never rejects a document for having the wrong shape; these
helpers turn a mistyped node into the empty value of the expected type.
"""

from __future__ import annotations

from typing import Any


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def text(value: Any, default: str = "") -> str:
    """Return *value* as a string, or *default* when it is missing or empty."""
    if value is None or value == "":
        return default
    return value if isinstance(value, str) else str(value)
