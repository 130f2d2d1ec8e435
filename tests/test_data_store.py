from __future__ import annotations

from collections.abc import Iterator, MutableMapping

import pytest

from pathstore.exceptions import InvalidPathError, PathNotFoundError
from pathstore.state.data import DataStore


def _store() -> DataStore:
    return DataStore("ns", {"a": {"b": 1, "c": {"deep": True}}, "x": [10, 20]})


def test_get_without_path_returns_root() -> None:
    store = _store()
    assert store.get() is store.root


def test_set_changes_identity_of_every_ancestor_only() -> None:
    store = _store()
    root_before = store.root
    a_before = root_before["a"]
    c_before = a_before["c"]
    x_before = root_before["x"]

    result = store.set(("a", "b"), 2)

    assert result.changed is True
    assert store.root is not root_before
    assert store.root["a"] is not a_before
    assert store.root["a"]["c"] is c_before
    assert store.root["x"] is x_before
    assert store.get(("a", "b")) == 2


def test_set_does_not_mutate_previous_snapshot() -> None:
    store = _store()
    snapshot = store.root

    store.set(("a", "b"), 99)

    assert snapshot["a"]["b"] == 1


def test_set_same_object_is_not_a_change() -> None:
    store = _store()
    root_before = store.root
    c_value = root_before["a"]["c"]

    result = store.set(("a", "c"), c_value)

    assert result.changed is False
    assert store.root is root_before


def test_equal_but_distinct_value_is_a_change() -> None:
    store = _store()
    root_before = store.root

    result = store.set(("a", "c"), {"deep": True})

    assert result.changed is True
    assert store.root is not root_before


def test_set_auto_vivifies_intermediate_mappings() -> None:
    store = _store()

    store.set(("new", "branch", "leaf"), "v")

    assert store.get(("new", "branch", "leaf")) == "v"


def test_set_without_auto_vivify_raises_and_leaves_state_intact() -> None:
    store = DataStore("ns", {"a": {}}, auto_vivify=False)
    root_before = store.root

    with pytest.raises(PathNotFoundError):
        store.set(("a", "missing", "leaf"), 1)

    assert store.root is root_before
    # creating a leaf in an existing container is still allowed
    store.set(("a", "leaf"), 1)
    assert store.get(("a", "leaf")) == 1


def test_set_into_list_by_index() -> None:
    store = _store()
    x_before = store.root["x"]

    store.set(("x", "1"), 21)
    store.set(("x", "2"), 30)

    assert store.get(("x",)) == [10, 21, 30]
    assert x_before == [10, 20]


def test_set_through_tuple_raises_invalid_path() -> None:
    store = DataStore("ns", {"point": (1, 2)})

    with pytest.raises(InvalidPathError):
        store.set(("point", "0"), 5)


def test_get_missing_leaf_raises_and_get_or_returns_default() -> None:
    store = _store()

    with pytest.raises(PathNotFoundError):
        store.get(("a", "nope"))
    assert store.get_or(("a", "nope"), "fallback") == "fallback"
    assert store.contains(("a", "b")) is True
    assert store.contains(("a", "nope")) is False


def test_root_set_and_replace() -> None:
    store = _store()
    new_root = {"fresh": 1}

    result = store.set(None, new_root)
    assert result.changed is True
    assert store.root is new_root

    store.replace({"other": 2})
    assert store.get(("other",)) == 2


class _Record(MutableMapping):
    def __init__(self, data: dict | None = None) -> None:
        self._fields = data if data is not None else {}

    def __getitem__(self, key: str) -> object:
        return self._fields[key]

    def __setitem__(self, key: str, value: object) -> None:
        self._fields[key] = value

    def __delitem__(self, key: str) -> None:
        del self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)


def test_write_into_custom_mapping_keeps_previous_snapshot() -> None:
    store = DataStore("ns", {"record": _Record({"v": 1})})
    before = store.get(("record",))

    store.set(("record", "v"), 2)

    assert before["v"] == 1
    assert store.get(("record", "v")) == 2
    assert type(store.get(("record",))) is _Record
