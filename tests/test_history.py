"""Tests for pi.reader.history.History."""

from __future__ import annotations

import logging

import pytest

from pi.reader.history import DEFAULT_SIZE, History


def filled(*lines: str, **options) -> History:
    history = History(**options)
    for line in lines:
        history.push(line)
    return history


class TestHistoryPush:
    """Adding entries and the push filters."""

    def test_defaults(self) -> None:
        history = History()
        assert history.max_size == DEFAULT_SIZE
        assert not history.cycle
        assert not history.duplicates
        assert len(history) == 0
        assert history.cursor is None

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            History(0)

    def test_push_stores_in_order(self) -> None:
        history = filled("a", "b", "c")
        assert list(history) == ["a", "b", "c"]
        assert history[0] == "a"

    def test_blank_lines_are_excluded_by_default(self) -> None:
        history = History()
        assert history.push("") is False
        assert history.push("   ") is False
        assert len(history) == 0

    def test_custom_exclude(self) -> None:
        history = History(exclude=lambda line: line.startswith("#"))
        history.push("# comment")
        history.push("ls")
        assert list(history) == ["ls"]

    def test_duplicates_rejected_anywhere(self) -> None:
        history = filled("a", "b", "a")
        assert list(history) == ["a", "b"]

    def test_duplicates_allowed(self) -> None:
        history = filled("a", "b", "a", duplicates=True)
        assert list(history) == ["a", "b", "a"]

    def test_evicts_oldest_past_capacity(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="pi.reader.history"):
            history = filled("line1", "line2", "line3", max_size=2)
        assert list(history) == ["line2", "line3"]
        assert "evicted" in caplog.text

    def test_push_resets_cursor(self) -> None:
        history = filled("a", "b")
        history.previous()
        history.push("c")
        assert history.cursor is None


class TestHistoryNavigation:
    """Moving backward and forward through entries."""

    def test_empty_history_has_nothing(self) -> None:
        history = History()
        assert not history.has_previous()
        assert not history.has_next()
        history.previous()
        assert history.get() is None

    def test_previous_walks_to_oldest_and_stops(self) -> None:
        history = filled("aa", "bb", "cc")
        seen = []
        while history.has_previous():
            history.previous()
            seen.append(history.get())
        assert seen == ["cc", "bb", "aa"]
        history.previous()
        assert history.get() == "aa"

    def test_previous_with_skip_keeps_cursor(self) -> None:
        history = filled("aa", "bb")
        history.previous()
        history.previous(skip=True)
        assert history.get() == "bb"

    def test_next_moves_past_newest(self) -> None:
        history = filled("aa", "bb")
        history.previous()
        history.previous()
        assert history.has_next()
        history.next()
        assert history.get() == "bb"
        history.next()
        assert history.get() is None
        assert not history.has_next()

    def test_cycle_wraps_both_ways(self) -> None:
        history = filled("aa", "bb", cycle=True)
        history.previous()
        history.previous()
        assert history.get() == "aa"
        assert history.has_previous()
        history.previous()
        assert history.get() == "bb"
        history.next()
        assert history.get() == "aa"

    def test_replace_overwrites_entry_under_cursor(self) -> None:
        history = filled("aa", "bb")
        history.previous()
        history.replace("bb edited")
        assert list(history) == ["aa", "bb edited"]

    def test_replace_past_end_is_noop(self) -> None:
        history = filled("aa")
        history.replace("zz")
        assert list(history) == ["aa"]

    def test_reset_and_clear(self) -> None:
        history = filled("aa", "bb")
        history.previous()
        history.reset()
        assert history.cursor is None
        history.clear()
        assert len(history) == 0
        assert not history.has_previous()


class TestHistoryCapacity:
    """Eviction once the history is full."""

    @pytest.mark.parametrize("capacity", [1, 3, 10])
    def test_keeps_most_recent_entries(self, capacity: int) -> None:
        lines = [f"line{i}" for i in range(capacity + 1)]
        history = filled(*lines, max_size=capacity)
        assert list(history) == lines[1:]
