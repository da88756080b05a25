"""Editable line buffer with a cursor, an attached prompt and width accounting."""

from __future__ import annotations

import re
from enum import Enum
from typing import Pattern

from pi.reader.utils import strip_ansi, visible_width

# The word break characters list used by shells
DEFAULT_WORD_BREAK_CHARACTERS = " \t\n\"\\'`@$><=|&{("

DEFAULT_SEPARATOR = re.compile("[" + re.escape(DEFAULT_WORD_BREAK_CHARACTERS) + "]")

DEFAULT_SCREEN_WIDTH = 80

_PROMPT_LINE_BREAK = re.compile(r"\r?\n")


class LineMode(str, Enum):
    EDIT = "edit"
    REPLACE = "replace"


class Line:
    """The text being edited plus its cursor position.

    The cursor is an index into ``text`` and always satisfies
    ``0 <= cursor <= len(text)``. The prompt is display-only and may span
    several rows; ``screen_width`` is needed to account for those rows.
    """

    def __init__(
        self,
        text: str = "",
        *,
        prompt: str = "",
        separator: str | Pattern[str] | None = None,
        screen_width: int = DEFAULT_SCREEN_WIDTH,
    ) -> None:
        self._text = text
        self._prompt = prompt
        self._screen_width = screen_width
        self._prompt_size = self.prompt_display_width()
        if separator is None:
            self._separator = DEFAULT_SEPARATOR
        elif isinstance(separator, str):
            self._separator = re.compile(separator)
        else:
            self._separator = separator
        self._cursor = len(self._text)
        self._mode = LineMode.EDIT

    # -- properties ---------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def prompt_size(self) -> int:
        return self._prompt_size

    @property
    def mode(self) -> LineMode:
        return self._mode

    @property
    def separator(self) -> Pattern[str]:
        return self._separator

    @property
    def editing(self) -> bool:
        return self._mode is LineMode.EDIT

    @property
    def replacing(self) -> bool:
        return self._mode is LineMode.REPLACE

    @property
    def at_start(self) -> bool:
        return self._cursor == 0

    @property
    def at_end(self) -> bool:
        return self._cursor == len(self._text)

    def edit_mode(self) -> None:
        self._mode = LineMode.EDIT

    def replace_mode(self) -> None:
        self._mode = LineMode.REPLACE

    # -- width accounting ---------------------------------------------------

    def prompt_display_width(self) -> int:
        """Columns taken by the prompt.

        Every prompt row past the first counts as a full screen row so
        multi-line prompts are cleared correctly.
        """
        lines = _PROMPT_LINE_BREAK.split(strip_ansi(self._prompt))
        while lines and not lines[-1]:
            lines.pop()
        if not lines:
            return 0
        return visible_width("".join(lines)) + (len(lines) - 1) * self._screen_width

    @property
    def text_size(self) -> int:
        """Display width of the text, ignoring embedded escape sequences."""
        return visible_width(self._text)

    @property
    def size(self) -> int:
        """Display width of the prompt and the text together."""
        return self._prompt_size + self.text_size

    @property
    def cursor_offset(self) -> int:
        """Display columns between the start of the text and the cursor."""
        return visible_width(self._text[: self._cursor])

    @property
    def tail_size(self) -> int:
        """Display columns between the cursor and the end of the text."""
        return visible_width(self._text[self._cursor :])

    # -- cursor movement ----------------------------------------------------

    def move_left(self, n: int = 1) -> None:
        self._cursor = max(0, self._cursor - n)

    def move_right(self, n: int = 1) -> None:
        self._cursor = min(len(self._text), self._cursor + n)

    def move_to_start(self) -> None:
        self._cursor = 0

    def move_to_end(self) -> None:
        self._cursor = len(self._text)

    # -- editing ------------------------------------------------------------

    def insert_at(self, index: int, chars: str) -> None:
        """Insert *chars* at *index* and place the cursor right after them.

        An index past the end pads the gap with spaces::

            line = Line("aaa")
            line.insert_at(5, "b")  # "aaa  b"
        """
        self.edit_mode()
        index = max(0, index)
        if index > len(self._text):
            self._text = self._text + " " * (index - len(self._text)) + chars
        else:
            self._text = self._text[:index] + chars + self._text[index:]
        self._cursor = index + len(chars)

    def insert(self, chars: str) -> None:
        """Insert *chars* at the cursor."""
        self.insert_at(self._cursor, chars)

    def delete(self, n: int = 1) -> None:
        """Remove *n* characters under and after the cursor."""
        self.delete_range(self._cursor, n)

    def delete_range(self, index: int, count: int) -> None:
        """Remove *count* characters starting at *index*."""
        if count <= 0 or index < 0 or index >= len(self._text):
            return
        self.edit_mode()
        removed = min(count, len(self._text) - index)
        self._text = self._text[:index] + self._text[index + removed :]
        if self._cursor > index:
            self._cursor -= min(removed, self._cursor - index)

    def remove(self, n: int = 1) -> None:
        """Remove up to *n* characters before the cursor."""
        n = min(n, self._cursor)
        self.move_left(n)
        self.delete_range(self._cursor, n)

    def replace(self, text: str) -> None:
        """Replace the whole text, leaving the cursor at the end."""
        self._text = text
        self._cursor = len(text)
        self.replace_mode()

    def __setitem__(self, index: int | slice, chars: str) -> None:
        if isinstance(index, slice):
            self.edit_mode()
            start, stop, _ = index.indices(len(self._text))
            self._text = self._text[:start] + chars + self._text[max(start, stop) :]
            self._cursor = min(self._cursor + len(chars), len(self._text))
            return
        self.insert_at(index, chars)

    def __getitem__(self, index: int | slice) -> str:
        return self._text[index]

    # -- words --------------------------------------------------------------

    @property
    def word_boundary(self) -> bool:
        """Whether the character under the cursor is a word separator."""
        if self._cursor >= len(self._text):
            return False
        return bool(self._separator.match(self._text, self._cursor))

    def word_start_pos(self, *, from_: int | None = None, before: bool = True) -> int:
        """Index where the word next to *from_* (default: cursor) starts.

        On a separator the search starts one character before (or after,
        when *before* is false) the position.
        """
        pos = self._cursor if from_ is None else from_
        if self.word_boundary:
            pos = pos - 1 if before else pos + 1

        start = self._rindex_separator(pos)
        return 0 if start is None else start + 1

    def word_end_pos(self, *, from_: int | None = None) -> int:
        """Index of the last character of the word starting at or after *from_*."""
        pos = self._cursor if from_ is None else from_
        match = self._separator.search(self._text, max(0, pos))
        end = match.start() if match else len(self._text)
        if self._text:
            end -= 1
        return end

    def word_range(self, *, before: bool = True) -> tuple[int, int]:
        """Inclusive ``(start, end)`` span of the word adjacent to the cursor."""
        start = self.word_start_pos(before=before)
        return start, self.word_end_pos(from_=start)

    def word(self, *, before: bool = True) -> str:
        start, end = self.word_range(before=before)
        return self._text[start : end + 1]

    def word_to_complete(self, *, before: bool = True) -> str:
        """The part of the adjacent word between its start and the cursor."""
        return self._text[self.word_start_pos(before=before) : self._cursor]

    def _rindex_separator(self, pos: int) -> int | None:
        if pos < 0:
            return None
        last = None
        for match in self._separator.finditer(self._text):
            if match.start() > pos:
                break
            last = match.start()
        return last

    # -- conversions --------------------------------------------------------

    def __str__(self) -> str:
        return f"{self._prompt}{self._text}"

    def __repr__(self) -> str:
        return repr(str(self))

    def __len__(self) -> int:
        return self.size

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Line):
            return str(self) == str(other) and self._cursor == other._cursor
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]
