"""Change detection and duplicate-registration policy.

Change detection is by identity only.  Two equal but distinct objects are a
change; the same object written back is not.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class DuplicatePolicy(StrEnum):
    DEDUPE = "dedupe"
    ACCUMULATE = "accumulate"


def value_changed(previous: Any, incoming: Any) -> bool:
    """Return ``True`` when *incoming* is a different object from *previous*."""
    return previous is not incoming


def is_deduplicating(policy: DuplicatePolicy) -> bool:
    """Whether a callback may run at most once per dispatch.

    Under ``DEDUPE`` the same callback subscribed at one path shares a
    single registration, and a callback subscribed at several prefixes of
    the written path only runs at the deepest of them.
    """
    return policy is DuplicatePolicy.DEDUPE
