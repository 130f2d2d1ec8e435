"""Path parsing and container navigation.

Paths are dot-delimited strings (``"a.b.c"``) or pre-split sequences of
segments.  Segments address mapping keys; a decimal segment addresses an
index when the container is a sequence.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any

from pathstore.exceptions import InvalidPathError, PathNotFoundError

Path = str | Sequence[str]


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@functools.lru_cache(maxsize=2048)
def _split(path: str, separator: str) -> tuple[str, ...]:
    segments = tuple(path.split(separator))
    if any(segment == "" for segment in segments):
        raise InvalidPathError(f"Path {path!r} contains an empty segment", path=path)
    return segments


def split_path(path: Path, separator: str = ".") -> tuple[str, ...]:
    """Split *path* into its ordered segments.

    String paths are cached, so repeated writes to the same path do not
    re-split.  Raises ``InvalidPathError`` for an empty path or segment.
    """
    if isinstance(path, str):
        if not path:
            raise InvalidPathError("Path must be a non-empty string", path=path)
        return _split(path, separator)

    if isinstance(path, (tuple, list)):
        segments = tuple(path)
        if not segments:
            raise InvalidPathError("Path must contain at least one segment", path=path)
        for segment in segments:
            if not isinstance(segment, str) or not segment:
                raise InvalidPathError(f"Invalid path segment {segment!r} in {path!r}", path=path)
        return segments

    raise InvalidPathError(f"Path must be a string or a sequence of strings, not {type(path).__name__}", path=path)


def join_path(segments: Sequence[str], separator: str = ".") -> str:
    return separator.join(segments)


def is_container(value: Any) -> bool:
    """True for values a path can step into."""
    if isinstance(value, Mapping):
        return True
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _index(segment: str) -> int | None:
    if segment.isdecimal():
        return int(segment)
    return None


def child(container: Any, segment: str) -> Any:
    """Return the value under *segment*, or ``MISSING``."""
    if isinstance(container, Mapping):
        return container.get(segment, MISSING)
    if is_container(container):
        index = _index(segment)
        if index is None or index >= len(container):
            return MISSING
        return container[index]
    return MISSING


def assign(container: Any, segment: str, value: Any, *, path: str = "") -> None:
    """Bind *value* under *segment* in a mutable *container*.

    A sequence index equal to the current length appends.
    """
    if isinstance(container, MutableMapping):
        container[segment] = value
        return
    if isinstance(container, MutableSequence):
        index = _index(segment)
        if index is None or index > len(container):
            raise PathNotFoundError(
                f"Index {segment!r} out of range for sequence of length {len(container)}",
                path=path,
                segment=segment,
            )
        if index == len(container):
            container.append(value)
        else:
            container[index] = value
        return
    raise InvalidPathError(
        f"Cannot write {segment!r} through immutable {type(container).__name__}",
        path=path,
    )


def _not_found(namespace: str, segments: Sequence[str], position: int, parent: Any) -> PathNotFoundError:
    path = join_path(segments)
    segment = segments[position]
    if parent is not MISSING and not is_container(parent):
        previous = segments[position - 1] if position else "<root>"
        remaining = join_path(segments[position:])
        message = f"{previous!r} is a leaf, cannot access {remaining!r}"
    else:
        message = f"Path segment {segment!r} not found"
    if namespace:
        message = f"{message} (namespace={namespace!r}, path={path!r})"
    return PathNotFoundError(message, namespace=namespace, path=path, segment=segment)


def resolve_chain(
    root: Any,
    segments: Sequence[str],
    *,
    auto_vivify: bool = False,
    namespace: str = "",
) -> list[Any]:
    """Return the containers from *root* down to the parent of the leaf.

    The result has one entry per segment: ``chain[i]`` holds
    ``segments[i]``.  With *auto_vivify*, a missing (or ``None``)
    intermediate yields a fresh detached ``dict`` in the chain; nothing
    is attached, so the caller decides where new containers go.
    """
    chain: list[Any] = []
    current = root
    for position, segment in enumerate(segments):
        if not is_container(current):
            raise _not_found(namespace, segments, position, current)
        chain.append(current)
        if position == len(segments) - 1:
            break
        nxt = child(current, segment)
        if nxt is MISSING or (nxt is None and auto_vivify):
            if not auto_vivify or not isinstance(current, Mapping):
                raise _not_found(namespace, segments, position, MISSING)
            nxt = {}
        current = nxt
    return chain


def navigate_parent(
    root: Any,
    segments: Sequence[str],
    *,
    auto_vivify: bool = False,
    namespace: str = "",
) -> Any:
    """Return the container holding the last segment.

    With *auto_vivify*, missing intermediates are created in place as empty
    dicts.
    """
    current = root
    for position, segment in enumerate(segments[:-1]):
        nxt = child(current, segment)
        if nxt is MISSING or (nxt is None and auto_vivify):
            if not auto_vivify or not isinstance(current, MutableMapping):
                raise _not_found(namespace, segments, position, current if not is_container(current) else MISSING)
            nxt = {}
            current[segment] = nxt
        current = nxt
    if not is_container(current):
        raise _not_found(namespace, segments, len(segments) - 1, current)
    return current


def navigate(
    root: Any,
    segments: Sequence[str],
    *,
    auto_vivify: bool = False,
    namespace: str = "",
) -> Any:
    """Return the value at *segments*; raise ``PathNotFoundError`` if absent."""
    parent = navigate_parent(root, segments, auto_vivify=auto_vivify, namespace=namespace)
    value = child(parent, segments[-1])
    if value is MISSING:
        raise _not_found(namespace, segments, len(segments) - 1, MISSING)
    return value
