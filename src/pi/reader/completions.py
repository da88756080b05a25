"""Cyclic store of completion suggestions."""

from __future__ import annotations

from typing import Iterable, Iterator


class Completions:
    """Suggestions for the word being completed plus a cyclic index.

    The index is 0 while empty and otherwise always points at a
    suggestion; ``next`` and ``previous`` wrap around.
    """

    def __init__(self) -> None:
        self._completions: list[str] = []
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def size(self) -> int:
        return len(self._completions)

    @property
    def empty(self) -> bool:
        return not self._completions

    @property
    def first(self) -> bool:
        return self._index == 0

    @property
    def last(self) -> bool:
        return self._index == self.size - 1

    def clear(self) -> None:
        self._completions.clear()
        self._index = 0

    def concat(self, suggestions: Iterable[str]) -> None:
        """Append *suggestions*; later changes to the source do not leak in."""
        self._completions.extend(str(s) for s in suggestions)

    def get(self) -> str | None:
        if not self._completions:
            return None
        return self._completions[self._index]

    def next(self) -> None:
        if not self._completions:
            return
        self._index = 0 if self.last else self._index + 1

    def previous(self) -> None:
        if not self._completions:
            return
        self._index = self.size - 1 if self.first else self._index - 1

    def to_list(self) -> list[str]:
        return list(self._completions)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._completions))

    def __len__(self) -> int:
        return len(self._completions)
