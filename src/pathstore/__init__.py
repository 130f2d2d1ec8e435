"""pathstore - namespaced, path-addressable store with change notification."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pathstore")
except PackageNotFoundError:
    __version__ = "0+local"
from pathstore._copy import shallow_copy
from pathstore.config import StoreConfig
from pathstore.exceptions import (
    InvalidNamespaceError,
    InvalidPathError,
    ListenerError,
    PathNotFoundError,
    PathStoreConfigError,
    PathStoreError,
)
from pathstore.registry import NamespaceEntry, Registry, Subscription
from pathstore.state.events import WriteEvent, WriteKind
from pathstore.state.policy import DuplicatePolicy
from pathstore.store import NamespacedStore, PathBinding, create_namespaced_store
from pathstore.writes import Assign, Change, Update

__all__ = [
    "__version__",
    "Assign",
    "Change",
    "DuplicatePolicy",
    "InvalidNamespaceError",
    "InvalidPathError",
    "ListenerError",
    "NamespaceEntry",
    "NamespacedStore",
    "PathBinding",
    "PathNotFoundError",
    "PathStoreConfigError",
    "PathStoreError",
    "Registry",
    "StoreConfig",
    "Subscription",
    "Update",
    "WriteEvent",
    "WriteKind",
    "create_namespaced_store",
    "shallow_copy",
]
