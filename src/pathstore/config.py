"""Store configuration for pathstore."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pathstore.exceptions import PathStoreConfigError
from pathstore.state.policy import DuplicatePolicy


def _env_bool(name: str, value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    raise PathStoreConfigError(f"{name} must be a boolean, got {value!r}")


@dataclasses.dataclass(frozen=True)
class StoreConfig:
    """Registry-wide behaviour switches.

    Parameters
    ----------
    separator : str
        Segment separator used when splitting string paths.
    auto_vivify : bool
        Create missing intermediate mappings on writes.  When ``False`` a
        write through a missing segment raises ``PathNotFoundError``.
    duplicate_policy : DuplicatePolicy
        What happens when the identical callback is subscribed twice at the
        same path.  ``DEDUPE`` shares one reference-counted registration, so
        the callback runs once for that path; ``ACCUMULATE`` keeps one
        registration per subscribe call.  A callback registered at several
        paths runs once per matching path either way.
    prune_listeners : bool
        Remove listener nodes left without registrations or children.
    notify_descendants : bool
        Also notify registrations below the written path.  Off by default:
        notification only walks upward from the changed leaf.
    raise_listener_errors : bool
        After a dispatch in which callbacks failed, raise ``ListenerError``
        to the writer.  Failures are always logged and never interrupt the
        fan-out.
    """

    separator: str = "."
    auto_vivify: bool = True
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.DEDUPE
    prune_listeners: bool = True
    notify_descendants: bool = False
    raise_listener_errors: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.separator, str) or len(self.separator) != 1:
            raise PathStoreConfigError(f"separator must be a single character, got {self.separator!r}")
        if not isinstance(self.duplicate_policy, DuplicatePolicy):
            try:
                policy = DuplicatePolicy(str(self.duplicate_policy).strip().lower())
            except ValueError as exc:
                raise PathStoreConfigError(f"Unknown duplicate policy {self.duplicate_policy!r}") from exc
            object.__setattr__(self, "duplicate_policy", policy)

    @classmethod
    def from_env(cls, **overrides: Any) -> StoreConfig:
        """Create configuration from ``PATHSTORE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        separator = env.get("PATHSTORE_SEPARATOR")
        if separator is not None:
            config_kwargs["separator"] = separator

        policy = env.get("PATHSTORE_DUPLICATE_POLICY")
        if policy is not None:
            config_kwargs["duplicate_policy"] = policy

        _ENV_BOOL_MAP = {
            "PATHSTORE_AUTO_VIVIFY": ("auto_vivify", True),
            "PATHSTORE_PRUNE_LISTENERS": ("prune_listeners", True),
            "PATHSTORE_NOTIFY_DESCENDANTS": ("notify_descendants", False),
            "PATHSTORE_RAISE_LISTENER_ERRORS": ("raise_listener_errors", False),
        }
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name in overrides:
                continue
            config_kwargs[field_name] = _env_bool(env_key, env.get(env_key), default)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
