"""One-level copies used to give ancestor containers a new identity."""

from __future__ import annotations

import copy
import re
from collections.abc import MutableMapping, MutableSequence, MutableSet
from datetime import date, time, timedelta
from typing import Any, TypeVar

T = TypeVar("T")

# Immutable, so a write can never go through them and identity is irrelevant.
# Compiled patterns are interned by ``re``; recompiling returns the same object.
_IMMUTABLE = (str, bytes, int, float, complex, bool, tuple, frozenset, range, re.Pattern)


def _rebuild(value: Any, builtin: type) -> Any:
    # Custom collections may keep their entries in an attribute that
    # copy.copy would share; hand the constructor fresh entries instead.
    entries = builtin(value)
    try:
        return type(value)(entries)
    except TypeError:
        return entries


def shallow_copy(value: T) -> T:
    """Return a new container of the same kind sharing every nested reference.

    Scalars, ``None`` and immutable containers are returned unchanged.
    Compiled patterns are returned as-is rather than recompiled: ``re``
    caches them, so a recompile would hand back the same object anyway.
    Collections whose constructor does not accept their own entries fall
    back to a plain ``dict``, ``list`` or ``set``.
    """
    if value is None or isinstance(value, _IMMUTABLE):
        return value

    if type(value) is dict:
        return value.copy()  # type: ignore[attr-defined]

    if type(value) is list:
        return value[:]  # type: ignore[index]

    if isinstance(value, (set, bytearray)):
        return value.copy()  # type: ignore[union-attr]

    if isinstance(value, (date, time, timedelta)):
        # copy.copy round-trips through __reduce__, giving a distinct
        # instance for the same instant (tzinfo preserved).
        return copy.copy(value)

    if isinstance(value, (dict, list)):
        # OrderedDict, defaultdict, ...: copy.copy keeps the concrete type
        # and its extras (default_factory) with fresh storage.
        return copy.copy(value)

    if isinstance(value, MutableMapping):
        return _rebuild(value, dict)
    if isinstance(value, MutableSequence):
        return _rebuild(value, list)
    if isinstance(value, MutableSet):
        return _rebuild(value, set)

    return value
