"""Tagged write variants.

A write is either a literal value (:class:`Assign`) or a function of the
current value (:class:`Update`).  Callers pick the variant explicitly, so a
callable can be stored as a plain value.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pathstore._paths import MISSING


@dataclass(frozen=True, slots=True)
class Assign:
    value: Any


@dataclass(frozen=True, slots=True)
class Update:
    """Compute the new value from the current one.

    ``default`` is passed to ``updater`` when the path does not resolve;
    without it a missing path raises ``PathNotFoundError``.
    """

    updater: Callable[[Any], Any]
    default: Any = MISSING


Change = Assign | Update
