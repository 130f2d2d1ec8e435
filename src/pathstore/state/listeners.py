"""Listener tree and notification dispatch.

Each namespace owns one :class:`ListenerTree`.  Its nodes mirror the paths
that have been subscribed to, and nothing else.  A write at ``a.b.c``
notifies the registrations at ``a.b.c``, ``a.b`` and ``a`` (deepest first),
then the always-on registrations made without a path.  Registrations below
the written path are left alone unless the dispatch asks for descendants.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from pathstore._paths import join_path
from pathstore.state.policy import DuplicatePolicy, is_deduplicating

_logger = logging.getLogger(__name__)

Callback = Callable[[], None]


@dataclass(eq=False, slots=True)
class Registration:
    """One callback registered at one path (``None`` for always-on).

    ``count`` is the number of live subscriptions sharing this
    registration; it only exceeds one under ``DuplicatePolicy.DEDUPE``.
    """

    callback: Callback
    segments: tuple[str, ...] | None
    count: int = 1
    active: bool = True


@dataclass(eq=False, slots=True)
class ListenerNode:
    segment: str | None = None
    parent: ListenerNode | None = None
    registrations: list[Registration] = field(default_factory=list)
    children: dict[str, ListenerNode] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.registrations and not self.children


@dataclass(slots=True)
class DispatchReport:
    """What a dispatch did."""

    invoked: int = 0
    failures: list[tuple[Callback, Exception]] = field(default_factory=list)


class ListenerTree:
    def __init__(
        self,
        namespace: str,
        *,
        policy: DuplicatePolicy = DuplicatePolicy.DEDUPE,
        prune: bool = True,
    ) -> None:
        self.namespace = namespace
        self._policy = policy
        self._prune = prune
        self._root = ListenerNode()
        self._always_on: list[Registration] = []

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_listener(self, segments: tuple[str, ...] | None, callback: Callback) -> Registration:
        """Register *callback* at *segments*, creating nodes as needed."""
        if segments is None:
            bucket = self._always_on
        else:
            bucket = self._node(segments, create=True).registrations  # type: ignore[union-attr]

        if is_deduplicating(self._policy):
            for registration in bucket:
                if registration.callback == callback:
                    registration.count += 1
                    return registration

        registration = Registration(callback=callback, segments=segments)
        bucket.append(registration)
        return registration

    def remove_listener(self, segments: tuple[str, ...] | None, callback: Callback) -> int:
        """Remove every registration of *callback* at *segments*.

        Returns the number of registrations removed.
        """
        node = None
        if segments is None:
            bucket = self._always_on
        else:
            node = self._node(segments, create=False)
            if node is None:
                return 0
            bucket = node.registrations

        removed = [registration for registration in bucket if registration.callback == callback]
        for registration in removed:
            bucket.remove(registration)
            registration.count = 0
            registration.active = False
        if node is not None:
            self._prune_from(node)
        return len(removed)

    def release(self, registration: Registration) -> None:
        """Drop one subscription's share of *registration*."""
        if not registration.active:
            return
        registration.count -= 1
        if registration.count > 0:
            return
        registration.active = False

        if registration.segments is None:
            self._always_on.remove(registration)
            return

        node = self._node(registration.segments, create=False)
        if node is None:
            return
        node.registrations.remove(registration)
        self._prune_from(node)

    def _node(self, segments: tuple[str, ...], *, create: bool) -> ListenerNode | None:
        node = self._root
        for segment in segments:
            nxt = node.children.get(segment)
            if nxt is None:
                if not create:
                    return None
                nxt = ListenerNode(segment=segment, parent=node)
                node.children[segment] = nxt
            node = nxt
        return node

    def _prune_from(self, node: ListenerNode) -> None:
        if not self._prune:
            return
        while node.parent is not None and node.is_empty:
            parent = node.parent
            del parent.children[node.segment]  # type: ignore[arg-type]
            node.parent = None
            _logger.debug("Listener node pruned namespace=%s segment=%s", self.namespace, node.segment)
            node = parent

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, segments: tuple[str, ...], *, include_descendants: bool = False) -> DispatchReport:
        """Notify the written path, each of its prefixes, then always-on."""
        path_nodes: list[ListenerNode] = []
        node: ListenerNode | None = self._root
        for segment in segments:
            node = node.children.get(segment) if node is not None else None
            if node is None:
                break
            path_nodes.append(node)

        ordered: list[Registration] = []
        if include_descendants and node is not None:
            for child in node.children.values():
                ordered.extend(self._post_order(child))
        for path_node in reversed(path_nodes):
            ordered.extend(path_node.registrations)
        ordered.extend(self._always_on)
        return self._invoke(ordered, join_path(segments))

    def dispatch_all(self) -> DispatchReport:
        """Notify every registration: the tree bottom-up, then always-on."""
        ordered = list(self._post_order(self._root))
        ordered.extend(self._always_on)
        return self._invoke(ordered, None)

    def _post_order(self, node: ListenerNode) -> Iterator[Registration]:
        for child in list(node.children.values()):
            yield from self._post_order(child)
        yield from node.registrations

    def _invoke(self, registrations: list[Registration], path: str | None) -> DispatchReport:
        report = DispatchReport()

        for registration in registrations:
            # Unsubscribed by an earlier callback of this dispatch.
            if not registration.active:
                continue
            try:
                registration.callback()
            except Exception as exc:
                _logger.warning(
                    "Listener callback failed namespace=%s path=%s callback=%r",
                    self.namespace,
                    path,
                    registration.callback,
                    exc_info=True,
                )
                report.failures.append((registration.callback, exc))
            else:
                report.invoked += 1
        return report

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def listener_count(self, segments: tuple[str, ...] | None = None) -> int:
        """Live subscriptions at *segments*, or always-on ones for ``None``."""
        if segments is None:
            bucket = self._always_on
        else:
            node = self._node(segments, create=False)
            bucket = node.registrations if node is not None else []
        return sum(registration.count for registration in bucket)

    def node_count(self) -> int:
        """Number of listener nodes below the namespace root."""

        def _count(node: ListenerNode) -> int:
            return sum(1 + _count(child) for child in node.children.values())

        return _count(self._root)

    def has_node(self, segments: tuple[str, ...]) -> bool:
        return self._node(segments, create=False) is not None
