from __future__ import annotations

from datetime import UTC, datetime

from pathstore._redact import summarize_for_log


def test_summarize_truncates_long_strings() -> None:
    summary = summarize_for_log({"value": "x" * 600}, max_string=10)

    assert summary["value"].startswith("x" * 10)
    assert "<truncated>" in summary["value"]


def test_summarize_caps_items_and_depth() -> None:
    value = {"items": list(range(20)), "deep": {"a": {"b": {"c": {"d": 1}}}}}

    summary = summarize_for_log(value, max_items=3, max_depth=3)

    assert summary["items"] == [0, 1, 2, "<17 more>"]
    assert summary["deep"]["a"]["b"] == "<dict:1>"


def test_summarize_bytes_and_objects() -> None:
    moment = datetime(2026, 1, 1, tzinfo=UTC)

    assert summarize_for_log(b"\x00" * 4) == "<bytes:4b>"
    assert summarize_for_log(moment) == repr(moment)
