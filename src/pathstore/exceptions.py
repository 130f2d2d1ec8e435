"""Custom exception hierarchy for pathstore."""

from __future__ import annotations

from collections.abc import Callable, Sequence


class PathStoreError(Exception):
    """Base exception for all pathstore errors."""


class PathStoreConfigError(PathStoreError):
    """Invalid configuration value."""


class InvalidNamespaceError(PathStoreError, ValueError):
    """Namespace identifier is empty or not a string."""

    def __init__(self, message: str, *, namespace: object = None) -> None:
        self.namespace = namespace
        super().__init__(message)


class InvalidPathError(PathStoreError, ValueError):
    """Path is empty, has an empty segment, or cannot be written through."""

    def __init__(self, message: str, *, path: object = None) -> None:
        self.path = path
        super().__init__(message)


class PathNotFoundError(PathStoreError, KeyError):
    """A path segment does not resolve.

    Raised on reads for a missing intermediate or leaf segment, and on
    writes when auto-vivification is disabled.  ``segment`` is the first
    segment that failed to resolve.
    """

    def __init__(
        self,
        message: str,
        *,
        namespace: str = "",
        path: str = "",
        segment: str = "",
    ) -> None:
        self.namespace = namespace
        self.path = path
        self.segment = segment
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class ListenerError(PathStoreError):
    """One or more listener callbacks raised during a dispatch.

    Only raised when ``StoreConfig.raise_listener_errors`` is enabled, and
    always after the whole fan-out has run.
    """

    def __init__(
        self,
        message: str,
        *,
        failures: Sequence[tuple[Callable[[], None], BaseException]] = (),
    ) -> None:
        self.failures = list(failures)
        super().__init__(message)
