"""Bounded store of accepted lines with a navigation cursor."""

from __future__ import annotations

import logging
from typing import Callable, Iterator

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 32 << 4


def exclude_blank(line: str) -> bool:
    """Default exclusion predicate: skip empty and whitespace-only lines."""
    return not line.strip()


class History:
    """Ordered, capacity-bounded record of lines, oldest first.

    The navigation cursor is either an index into the entries or
    ``None``, meaning past the newest entry (nothing selected). Pushing a
    line resets the cursor past the end.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_SIZE,
        *,
        cycle: bool = False,
        duplicates: bool = False,
        exclude: Callable[[str], bool] = exclude_blank,
    ) -> None:
        if max_size <= 0:
            raise ValueError(f"History size must be positive, got {max_size}")
        self.max_size = max_size
        self.cycle = cycle
        self.duplicates = duplicates
        self.exclude = exclude
        self._entries: list[str] = []
        self._cursor: int | None = None

    @property
    def cursor(self) -> int | None:
        return self._cursor

    def push(self, line: str) -> bool:
        """Record *line*. Returns whether it was stored."""
        if not line or self.exclude(line):
            logger.debug("History push excluded: %r", line)
            return False
        if not self.duplicates and line in self._entries:
            logger.debug("History push rejected as duplicate: %r", line)
            return False

        self._entries.append(line)
        while len(self._entries) > self.max_size:
            evicted = self._entries.pop(0)
            logger.debug("History full, evicted: %r", evicted)
        self._cursor = None
        return True

    def has_previous(self) -> bool:
        if not self._entries:
            return False
        return self._cursor is None or self._cursor > 0 or self.cycle

    def previous(self, skip: bool = False) -> None:
        """Move toward older entries.

        With *skip* the cursor stays put, so the current entry can be
        read again without spending a navigation step.
        """
        if not self._entries or skip:
            return
        if self._cursor is None:
            self._cursor = len(self._entries) - 1
        elif self._cursor > 0:
            self._cursor -= 1
        elif self.cycle:
            self._cursor = len(self._entries) - 1

    def has_next(self) -> bool:
        return bool(self._entries) and self._cursor is not None

    def next(self) -> None:
        """Move toward newer entries, past the newest unless cycling."""
        if self._cursor is None:
            return
        if self._cursor < len(self._entries) - 1:
            self._cursor += 1
        elif self.cycle:
            self._cursor = 0
        else:
            self._cursor = None

    def get(self) -> str | None:
        """The entry under the cursor, or None past the end."""
        if self._cursor is None:
            return None
        return self._entries[self._cursor]

    def replace(self, line: str) -> None:
        """Overwrite the entry under the cursor with edited text."""
        if self._cursor is None:
            return
        self._entries[self._cursor] = line

    def reset(self) -> None:
        """Move the cursor past the newest entry."""
        self._cursor = None

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = None

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
