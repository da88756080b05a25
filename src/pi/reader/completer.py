"""Cycling word completion over a :class:`~pi.reader.line.Line`."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable

from pi.reader.completions import Completions

if TYPE_CHECKING:
    from pi.reader.line import Line

CompletionHandler = Callable[[str], Iterable[str]]


class Direction(str, Enum):
    NEXT = "next"
    PREVIOUS = "previous"


@dataclass(frozen=True)
class CompletionEvent:
    """Published as ``complete`` after each completion step."""

    completion: str
    completions: tuple[str, ...]
    line: str
    word: str

    @classmethod
    def from_completer(cls, completer: Completer, completion: str, line: str) -> CompletionEvent:
        return cls(
            completion=completion,
            completions=tuple(completer.completions),
            line=line,
            word=completer.word,
        )


class Completer:
    """Completes the word before the cursor, cycling through suggestions.

    The first step for a word asks the handler for suggestions and inserts
    the first (or, going backward, the last) one. Later steps walk the
    suggestions and pass through the original word once per lap::

        word -> s1 -> s2 -> ... -> sN -> word -> s1 ...

    Every suggestion is followed by ``suffix``; the original word is not.
    """

    def __init__(self, handler: CompletionHandler | None = None, *, suffix: str = "") -> None:
        self.handler = handler
        self.suffix = suffix
        self.completions = Completions()
        self.word = ""
        self._showing_initial = False

    @property
    def showing_initial(self) -> bool:
        return self._showing_initial

    def complete(
        self,
        line: Line,
        *,
        initial: bool = False,
        direction: Direction = Direction.NEXT,
    ) -> str | None:
        """Run one completion step. Returns the inserted word or None."""
        if initial:
            return self.complete_initial(line, direction=direction)
        return self.complete_next(line, direction=direction)

    def complete_initial(self, line: Line, *, direction: Direction = Direction.NEXT) -> str | None:
        self.word = line.word_to_complete()
        self._showing_initial = False
        self.completions.clear()

        if self.handler is None:
            return None
        suggestions = self.handler(self.word)
        self.completions.concat(suggestions)
        if self.completions.empty:
            return None

        if direction is Direction.PREVIOUS:
            self.completions.previous()
        completed = self.completions.get()
        assert completed is not None

        line.remove(len(self.word))
        line.insert(completed + self.suffix)
        return completed

    def complete_next(self, line: Line, *, direction: Direction = Direction.NEXT) -> str | None:
        if self.completions.empty:
            return None

        removed = self._inserted_length()
        at_edge = self.completions.last if direction is Direction.NEXT else self.completions.first

        if self._showing_initial:
            # Leaving the bare word: continue past the edge we left from,
            # or return to it when the direction was reversed.
            self._showing_initial = False
            if at_edge:
                self._step(direction)
            completed = self.completions.get()
        elif at_edge:
            self._showing_initial = True
            completed = self.word
        else:
            self._step(direction)
            completed = self.completions.get()
        assert completed is not None

        line.remove(removed)
        line.insert(self._with_suffix(completed))
        return completed

    def cancel(self, line: Line) -> None:
        """Put the original word back in place of the current suggestion."""
        if self.completions.empty:
            return
        line.remove(self._inserted_length())
        line.insert(self.word)
        self._showing_initial = True

    def _step(self, direction: Direction) -> None:
        if direction is Direction.NEXT:
            self.completions.next()
        else:
            self.completions.previous()

    def _inserted_length(self) -> int:
        if self._showing_initial:
            return len(self.word)
        current = self.completions.get() or ""
        return len(current) + len(self.suffix)

    def _with_suffix(self, completed: str) -> str:
        return completed if self._showing_initial else completed + self.suffix
