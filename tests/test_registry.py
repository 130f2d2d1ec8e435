from __future__ import annotations

import pytest

from pathstore import (
    Assign,
    InvalidNamespaceError,
    InvalidPathError,
    ListenerError,
    PathNotFoundError,
    Registry,
    StoreConfig,
    Update,
    WriteEvent,
    WriteKind,
)


def test_namespace_is_created_once_and_keeps_its_value() -> None:
    registry = Registry()

    first = registry.entry("app", {"v": 1})
    second = registry.entry("app", {"v": 2})

    assert first is second
    assert registry.get("app", "v") == 1
    assert registry.has_namespace("app")
    assert registry.namespaces() == ["app"]


def test_first_reference_uses_empty_dict_by_default() -> None:
    registry = Registry()

    assert registry.get("lazy") == {}
    assert registry.has_namespace("lazy")


@pytest.mark.parametrize("namespace", ["", "   ", None, 42])
def test_invalid_namespace_rejected(namespace: object) -> None:
    registry = Registry()

    with pytest.raises(InvalidNamespaceError):
        registry.get(namespace)  # type: ignore[arg-type]


def test_empty_path_rejected() -> None:
    registry = Registry()

    with pytest.raises(InvalidPathError):
        registry.set("app", "", 1)
    with pytest.raises(InvalidPathError):
        registry.subscribe("app", "a..b", lambda: None)


def test_namespaces_are_isolated() -> None:
    registry = Registry()
    calls: list[str] = []
    registry.subscribe("one", None, lambda: calls.append("one"))

    registry.set("two", "shared", 1)

    assert calls == []
    with pytest.raises(PathNotFoundError):
        registry.get("one", "shared")


def test_separate_registries_share_nothing() -> None:
    first = Registry()
    second = Registry()

    first.set("app", "v", 1)

    assert second.get_or("app", "v") is None


def test_update_with_default_for_missing_path() -> None:
    registry = Registry()

    assert registry.update("app", "hits", lambda v: v + 1, default=0) == 1
    assert registry.update("app", "hits", lambda v: v + 1) == 2
    with pytest.raises(PathNotFoundError):
        registry.update("app", "misses", lambda v: v + 1)


def test_write_accepts_tagged_variants_and_stores_callables_literally() -> None:
    registry = Registry()

    def handler(value: int) -> int:
        return value * 2

    registry.write("app", "handler", Assign(handler))
    registry.write("app", "n", Assign(3))
    registry.write("app", "n", Update(registry.get("app", "handler")))

    assert registry.get("app", "handler") is handler
    assert registry.get("app", "n") == 6
    with pytest.raises(TypeError):
        registry.write("app", "n", 5)  # type: ignore[arg-type]


def test_root_write_notifies_every_listener() -> None:
    registry = Registry()
    calls: list[str] = []
    registry.subscribe("app", "a.b", lambda: calls.append("a.b"))
    registry.subscribe("app", "z", lambda: calls.append("z"))
    registry.subscribe("app", None, lambda: calls.append("*"))

    registry.set("app", None, {"fresh": True})

    assert calls == ["a.b", "z", "*"]
    assert registry.get("app") == {"fresh": True}


def test_replace_does_not_notify() -> None:
    registry = Registry()
    calls: list[str] = []
    registry.subscribe("app", None, lambda: calls.append("*"))

    registry.replace("app", {"v": 1})

    assert calls == []
    assert registry.get("app", "v") == 1


def test_replace_initializes_unknown_namespace() -> None:
    registry = Registry()

    registry.replace("new", [1, 2])

    assert registry.get("new") == [1, 2]


def test_unchanged_write_still_notifies() -> None:
    registry = Registry()
    registry.entry("app", {"v": 1})
    calls: list[str] = []
    registry.subscribe("app", "v", lambda: calls.append("v"))

    registry.set("app", "v", registry.get("app", "v"))

    assert calls == ["v"]


def test_on_write_hook_receives_events() -> None:
    events: list[WriteEvent] = []
    registry = Registry(on_write=events.append)
    registry.entry("app", {"v": 1})

    registry.set("app", "v", 2)
    registry.set("app", "v", registry.get("app", "v"))
    registry.set("app", None, {})

    assert [event.kind for event in events] == [WriteKind.PATH, WriteKind.PATH, WriteKind.ROOT]
    assert events[0].path == "v"
    assert events[0].segments == ("v",)
    assert events[0].changed is True
    assert events[1].changed is False
    assert events[2].path is None


def test_failing_on_write_hook_is_isolated() -> None:
    def _hook(_event: WriteEvent) -> None:
        raise RuntimeError("hook")

    registry = Registry(on_write=_hook)

    registry.set("app", "v", 1)

    assert registry.get("app", "v") == 1


def test_listener_errors_raised_after_fan_out_when_configured() -> None:
    registry = Registry(StoreConfig(raise_listener_errors=True))
    calls: list[str] = []

    def _boom() -> None:
        raise ValueError("bad listener")

    registry.subscribe("app", "a.b", _boom)
    registry.subscribe("app", "a", lambda: calls.append("a"))

    with pytest.raises(ListenerError) as excinfo:
        registry.set("app", "a.b", 1)

    assert calls == ["a"]
    assert registry.get("app", "a.b") == 1
    assert len(excinfo.value.failures) == 1
    assert excinfo.value.failures[0][0] is _boom


def test_notify_descendants_config() -> None:
    registry = Registry(StoreConfig(notify_descendants=True))
    calls: list[str] = []
    registry.subscribe("app", "a.b", lambda: calls.append("a.b"))

    registry.set("app", "a", {"b": 2})

    assert calls == ["a.b"]


def test_unsubscribe_by_callback() -> None:
    registry = Registry()
    calls: list[str] = []

    def callback() -> None:
        calls.append("cb")

    handle = registry.subscribe("app", "v", callback)
    assert registry.unsubscribe("app", "v", callback) == 1

    registry.set("app", "v", 1)

    assert calls == []
    handle()
    assert handle.active is False


def test_subscribe_rejects_non_callable() -> None:
    registry = Registry()

    with pytest.raises(TypeError):
        registry.subscribe("app", "v", "not callable")  # type: ignore[arg-type]


def test_auto_vivify_disabled_by_config() -> None:
    registry = Registry(StoreConfig(auto_vivify=False))

    with pytest.raises(PathNotFoundError):
        registry.set("app", "a.b", 1)
