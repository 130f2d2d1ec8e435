"""Per-namespace value tree with copy-on-write path updates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pathstore._copy import shallow_copy
from pathstore._paths import MISSING, assign, child, join_path, navigate, resolve_chain
from pathstore._redact import summarize_for_log
from pathstore.exceptions import PathNotFoundError
from pathstore.state.policy import value_changed

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WriteResult:
    """Outcome of :meth:`DataStore.set`."""

    changed: bool


class DataStore:
    """The value tree of a single namespace.

    Writes never mutate a container reachable from an earlier root: the
    parent of the written leaf and every ancestor up to the root are
    shallow-copied and relinked, while every sibling subtree is shared
    as-is.  A root obtained through :meth:`get` is therefore a stable
    snapshot.
    """

    def __init__(self, namespace: str, initial: Any, *, auto_vivify: bool = True) -> None:
        self.namespace = namespace
        self._auto_vivify = auto_vivify
        self._root = initial

    @property
    def root(self) -> Any:
        return self._root

    def get(self, segments: tuple[str, ...] | None = None) -> Any:
        """Return the root, or the value at *segments*.

        Raises ``PathNotFoundError`` when any segment is absent.
        """
        if segments is None:
            return self._root
        return navigate(self._root, segments, namespace=self.namespace)

    def get_or(self, segments: tuple[str, ...] | None, default: Any = None) -> Any:
        try:
            return self.get(segments)
        except PathNotFoundError:
            return default

    def contains(self, segments: tuple[str, ...]) -> bool:
        return self.get_or(segments, MISSING) is not MISSING

    def set(self, segments: tuple[str, ...] | None, value: Any) -> WriteResult:
        """Write *value* at *segments*, or replace the root when ``None``."""
        if segments is None:
            previous = self._root
            self._root = value
            _logger.debug("Root replaced namespace=%s value=%s", self.namespace, summarize_for_log(value))
            return WriteResult(changed=value_changed(previous, value))

        chain = resolve_chain(self._root, segments, auto_vivify=self._auto_vivify, namespace=self.namespace)
        previous = child(chain[-1], segments[-1])
        if not value_changed(previous, value):
            return WriteResult(changed=False)

        path = join_path(segments)
        replacement = value
        for container, segment in zip(reversed(chain), reversed(segments), strict=True):
            copied = shallow_copy(container)
            assign(copied, segment, replacement, path=path)
            replacement = copied

        self._root = replacement
        _logger.debug(
            "Value written namespace=%s path=%s value=%s",
            self.namespace,
            path,
            summarize_for_log(value),
        )
        return WriteResult(changed=True)

    def replace(self, value: Any) -> None:
        """Overwrite the root without path resolution or change tracking."""
        self._root = value
