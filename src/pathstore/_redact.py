"""Helpers for safe debug logging.

Store values can be arbitrarily large nested structures.  This module
renders a bounded summary of a value before it goes into a DEBUG log.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence, Set
from typing import Any


def summarize_for_log(
    value: Any,
    *,
    max_string: int = 120,
    max_items: int = 8,
    max_depth: int = 3,
    _depth: int = 0,
) -> Any:
    """Return a bounded copy of *value* suitable for debug logs."""
    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if _depth >= max_depth:
        return f"<{type(value).__name__}:{_size(value)}>"

    kwargs = {"max_string": max_string, "max_items": max_items, "max_depth": max_depth, "_depth": _depth + 1}

    if isinstance(value, Mapping):
        summary: dict[str, Any] = {}
        for index, (k, v) in enumerate(value.items()):
            if index >= max_items:
                summary["…"] = f"<{len(value) - max_items} more>"
                break
            summary[str(k)] = summarize_for_log(v, **kwargs)
        return summary

    if isinstance(value, (Sequence, Set)):
        items = [summarize_for_log(v, **kwargs) for _, v in zip(range(max_items), value, strict=False)]
        if len(value) > max_items:
            items.append(f"<{len(value) - max_items} more>")
        return items

    # Fallback: a truncated repr, never the object itself.
    text = repr(value)
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text


def _size(value: Any) -> str:
    try:
        return str(len(value))
    except TypeError:
        return "?"
