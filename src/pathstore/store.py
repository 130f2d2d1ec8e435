"""Namespace-bound store handles.

:func:`create_namespaced_store` is the entry point for application code and
for the binding layer of a UI framework::

    registry = Registry()
    counter = create_namespaced_store("counter", {"value": 0}, registry)

    unsubscribe = counter.subscribe("value", rerender)
    counter.update("value", lambda v: v + 1)
    counter.get("value")  # 1
    unsubscribe()

Callbacks receive no arguments; they call ``get`` again to read the new
value.  Snapshots returned by ``get`` are never mutated by later writes,
and untouched subtrees keep their identity, so consumers can compare with
``is``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from pathstore._paths import MISSING, Path, join_path
from pathstore.registry import Registry, Subscription
from pathstore.state.listeners import Callback
from pathstore.writes import Change


class NamespacedStore:
    """Read, write and subscribe within one namespace of a registry."""

    __slots__ = ("_registry", "namespace")

    def __init__(self, registry: Registry, namespace: str, initial: Any = MISSING) -> None:
        self._registry = registry
        self.namespace = registry.entry(namespace, initial).namespace

    def __repr__(self) -> str:
        return f"NamespacedStore({self.namespace!r})"

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def snapshot(self) -> Any:
        """The current namespace root."""
        return self._registry.get(self.namespace)

    def get(self, path: Path | None = None) -> Any:
        """Return the value at *path*, or the whole root.

        Raises ``PathNotFoundError`` when the path does not resolve.
        """
        return self._registry.get(self.namespace, path)

    def get_or(self, path: Path | None, default: Any = None) -> Any:
        return self._registry.get_or(self.namespace, path, default)

    def contains(self, path: Path) -> bool:
        return self._registry.contains(self.namespace, path)

    def set(self, path: Path | None, value: Any) -> None:
        self._registry.set(self.namespace, path, value)

    def update(self, path: Path | None, updater: Callable[[Any], Any], *, default: Any = MISSING) -> Any:
        return self._registry.update(self.namespace, path, updater, default=default)

    def write(self, path: Path | None, change: Change) -> Any:
        return self._registry.write(self.namespace, path, change)

    def set_root(self, value: Any) -> None:
        """Replace the whole namespace value; every subscriber is notified."""
        self._registry.set(self.namespace, None, value)

    def update_root(self, updater: Callable[[Any], Any]) -> Any:
        return self._registry.update(self.namespace, None, updater)

    def subscribe(self, path: Path | None, callback: Callback) -> Subscription:
        return self._registry.subscribe(self.namespace, path, callback)

    def bind(self, path: Path) -> PathBinding:
        return PathBinding(self, path)

    async def wait_for(
        self,
        path: Path | None = None,
        *,
        predicate: Callable[[Any], bool] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Wait for the next notification at *path* and return the new value.

        With *predicate*, keep waiting until it accepts the value.  Raises
        ``TimeoutError`` after *timeout* seconds.  Writes must happen on the
        running event loop's thread.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        def _on_change() -> None:
            if future.done():
                return
            value = self.get_or(path, MISSING)
            if value is MISSING:
                return
            try:
                accepted = predicate is None or predicate(value)
            except Exception as exc:
                future.set_exception(exc)
                return
            if accepted:
                future.set_result(value)

        subscription = self.subscribe(path, _on_change)
        try:
            return await asyncio.wait_for(future, timeout)
        finally:
            subscription.unsubscribe()


class PathBinding:
    """A store handle fixed to one path.

    The path is split once at construction.  This is what a UI component
    holds on to: ``get`` for rendering, ``subscribe`` for re-render
    scheduling, ``set`` / ``update`` for event handlers.
    """

    __slots__ = ("_store", "segments")

    def __init__(self, store: NamespacedStore, path: Path) -> None:
        self._store = store
        self.segments = store.registry.segments(path)

    def __repr__(self) -> str:
        return f"PathBinding({self._store.namespace!r}, {self.path!r})"

    @property
    def path(self) -> str:
        return join_path(self.segments, self._store.registry.config.separator)  # type: ignore[arg-type]

    def get(self) -> Any:
        return self._store.get(self.segments)

    def get_or(self, default: Any = None) -> Any:
        return self._store.get_or(self.segments, default)

    def set(self, value: Any) -> None:
        self._store.set(self.segments, value)

    def update(self, updater: Callable[[Any], Any], *, default: Any = MISSING) -> Any:
        return self._store.update(self.segments, updater, default=default)

    def subscribe(self, callback: Callback) -> Subscription:
        return self._store.subscribe(self.segments, callback)

    async def wait_for(
        self,
        *,
        predicate: Callable[[Any], bool] | None = None,
        timeout: float | None = None,
    ) -> Any:
        return await self._store.wait_for(self.segments, predicate=predicate, timeout=timeout)


def create_namespaced_store(namespace: str, initial_value: Any, registry: Registry) -> NamespacedStore:
    """Return a handle for *namespace*, creating it with *initial_value* if new.

    An existing namespace keeps its current value; *initial_value* is ignored.
    """
    return NamespacedStore(registry, namespace, initial_value)
