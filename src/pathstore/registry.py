"""Namespace registry and subscription handles.

A :class:`Registry` maps namespace names to their value tree and listener
tree.  Entries are created on first reference and live as long as the
registry.  Registries share nothing, so tests (or independent parts of an
application) can each build their own.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pathstore._paths import MISSING, Path, join_path, split_path
from pathstore._redact import summarize_for_log
from pathstore.config import StoreConfig
from pathstore.exceptions import InvalidNamespaceError, ListenerError
from pathstore.state.data import DataStore
from pathstore.state.events import WriteEvent, WriteKind
from pathstore.state.listeners import Callback, DispatchReport, ListenerTree, Registration
from pathstore.writes import Assign, Change, Update

_logger = logging.getLogger(__name__)


def _check_namespace(namespace: Any) -> str:
    if not isinstance(namespace, str):
        raise InvalidNamespaceError(
            f"Namespace must be a string, not {type(namespace).__name__}",
            namespace=namespace,
        )
    if not namespace.strip():
        raise InvalidNamespaceError("Namespace must be non-empty", namespace=namespace)
    return namespace


@dataclass(slots=True)
class NamespaceEntry:
    """Everything a namespace owns."""

    namespace: str
    data: DataStore
    listeners: ListenerTree


class Subscription:
    """Handle returned by ``subscribe``.

    Calling it (or :meth:`unsubscribe`) removes the registration it added.
    Further calls do nothing.  Also usable as a context manager.
    """

    __slots__ = ("namespace", "path", "_tree", "_registration")

    def __init__(
        self,
        tree: ListenerTree,
        registration: Registration,
        *,
        namespace: str,
        path: str | None,
    ) -> None:
        self.namespace = namespace
        self.path = path
        self._tree = tree
        self._registration: Registration | None = registration

    def __repr__(self) -> str:
        state = "active" if self.active else "closed"
        return f"Subscription(namespace={self.namespace!r}, path={self.path!r}, {state})"

    @property
    def active(self) -> bool:
        return self._registration is not None

    def unsubscribe(self) -> None:
        registration, self._registration = self._registration, None
        if registration is None:
            return
        self._tree.release(registration)
        _logger.debug("Unsubscribed namespace=%s path=%s", self.namespace, self.path)

    def __call__(self) -> None:
        self.unsubscribe()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.unsubscribe()


class Registry:
    """Process-local map of namespace to store state.

    Usage::

        registry = Registry()
        registry.set("counter", "value", 1)
        unsubscribe = registry.subscribe("counter", "value", on_change)
    """

    def __init__(
        self,
        config: StoreConfig | None = None,
        *,
        on_write: Callable[[WriteEvent], None] | None = None,
    ) -> None:
        self._config = config or StoreConfig()
        self._on_write = on_write
        self._entries: dict[str, NamespaceEntry] = {}

    @property
    def config(self) -> StoreConfig:
        return self._config

    # ------------------------------------------------------------------
    # Namespaces
    # ------------------------------------------------------------------

    def entry(self, namespace: str, initial: Any = MISSING) -> NamespaceEntry:
        """Return the entry for *namespace*, creating it on first use.

        *initial* only applies when the entry is created; it defaults to an
        empty ``dict``.
        """
        namespace = _check_namespace(namespace)
        existing = self._entries.get(namespace)
        if existing is not None:
            return existing

        value = {} if initial is MISSING else initial
        entry = NamespaceEntry(
            namespace=namespace,
            data=DataStore(namespace, value, auto_vivify=self._config.auto_vivify),
            listeners=ListenerTree(
                namespace,
                policy=self._config.duplicate_policy,
                prune=self._config.prune_listeners,
            ),
        )
        self._entries[namespace] = entry
        _logger.debug("Namespace created namespace=%s initial=%s", namespace, summarize_for_log(value))
        return entry

    def has_namespace(self, namespace: str) -> bool:
        return namespace in self._entries

    def namespaces(self) -> list[str]:
        return list(self._entries)

    def segments(self, path: Path | None) -> tuple[str, ...] | None:
        """Split *path* with this registry's separator; ``None`` stays ``None``."""
        if path is None:
            return None
        return split_path(path, self._config.separator)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, namespace: str, path: Path | None = None) -> Any:
        return self.entry(namespace).data.get(self.segments(path))

    def get_or(self, namespace: str, path: Path | None, default: Any = None) -> Any:
        return self.entry(namespace).data.get_or(self.segments(path), default)

    def contains(self, namespace: str, path: Path) -> bool:
        segments = split_path(path, self._config.separator)
        return self.entry(namespace).data.contains(segments)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set(self, namespace: str, path: Path | None, value: Any) -> None:
        """Write *value* at *path* (the root when ``None``) and notify."""
        self._commit(self.entry(namespace), self.segments(path), value)

    def update(
        self,
        namespace: str,
        path: Path | None,
        updater: Callable[[Any], Any],
        *,
        default: Any = MISSING,
    ) -> Any:
        """Replace the value at *path* with ``updater(current)``.

        Returns the new value.
        """
        entry = self.entry(namespace)
        segments = self.segments(path)
        if default is MISSING:
            current = entry.data.get(segments)
        else:
            current = entry.data.get_or(segments, default)
        value = updater(current)
        self._commit(entry, segments, value)
        return value

    def write(self, namespace: str, path: Path | None, change: Change) -> Any:
        """Apply an :class:`Assign` or :class:`Update`; return the written value."""
        if isinstance(change, Assign):
            self.set(namespace, path, change.value)
            return change.value
        if isinstance(change, Update):
            return self.update(namespace, path, change.updater, default=change.default)
        raise TypeError(f"change must be Assign or Update, not {type(change).__name__}")

    def replace(self, namespace: str, value: Any) -> None:
        """Force the root of *namespace* to *value* without notifying anyone."""
        entry = self._entries.get(_check_namespace(namespace))
        if entry is None:
            self.entry(namespace, value)
            return
        entry.data.replace(value)

    def _commit(self, entry: NamespaceEntry, segments: tuple[str, ...] | None, value: Any) -> None:
        result = entry.data.set(segments, value)

        report: DispatchReport
        if segments is None:
            report = entry.listeners.dispatch_all()
        else:
            report = entry.listeners.dispatch(
                segments,
                include_descendants=self._config.notify_descendants,
            )

        if self._on_write is not None:
            self._emit(
                WriteEvent(
                    namespace=entry.namespace,
                    kind=WriteKind.ROOT if segments is None else WriteKind.PATH,
                    path=None if segments is None else join_path(segments, self._config.separator),
                    segments=segments or (),
                    changed=result.changed,
                )
            )

        if report.failures and self._config.raise_listener_errors:
            raise ListenerError(
                f"{len(report.failures)} listener callback(s) failed in namespace {entry.namespace!r}",
                failures=report.failures,
            )

    def _emit(self, event: WriteEvent) -> None:
        try:
            self._on_write(event)  # type: ignore[misc]
        except Exception:
            _logger.warning("on_write hook failed namespace=%s path=%s", event.namespace, event.path, exc_info=True)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, namespace: str, path: Path | None, callback: Callback) -> Subscription:
        """Call *callback* whenever *path* or anything beneath it is written.

        Without a path the callback runs on every write to the namespace.
        """
        if not callable(callback):
            raise TypeError(f"callback must be callable, not {type(callback).__name__}")
        entry = self.entry(namespace)
        segments = self.segments(path)
        registration = entry.listeners.add_listener(segments, callback)
        dotted = None if segments is None else join_path(segments, self._config.separator)
        _logger.debug("Subscribed namespace=%s path=%s callback=%r", entry.namespace, dotted, callback)
        return Subscription(entry.listeners, registration, namespace=entry.namespace, path=dotted)

    def unsubscribe(self, namespace: str, path: Path | None, callback: Callback) -> int:
        """Remove every registration of *callback* at *path*.

        Handles returned by :meth:`subscribe` for those registrations become
        no-ops.  Returns the number of registrations removed.
        """
        entry = self.entry(namespace)
        return entry.listeners.remove_listener(self.segments(path), callback)
