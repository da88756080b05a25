"""ANSI cursor movement and line clearing sequences used for redraws."""

from __future__ import annotations

_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"
_CURSOR_FORWARD_FMT = "\x1b[{}C"
_CURSOR_BACKWARD_FMT = "\x1b[{}D"
_COLUMN_FMT = "\x1b[{}G"
_ERASE_LINE = "\x1b[2K"


def up(count: int = 1) -> str:
    return _CURSOR_UP_FMT.format(count)


def down(count: int = 1) -> str:
    return _CURSOR_DOWN_FMT.format(count)


def forward(count: int = 1) -> str:
    return _CURSOR_FORWARD_FMT.format(count)


def backward(count: int = 1) -> str:
    return _CURSOR_BACKWARD_FMT.format(count)


def column(n: int = 1) -> str:
    """Move the cursor to column *n* (1-based) of the current row."""
    return _COLUMN_FMT.format(n)


def clear_line() -> str:
    """Erase the current row and return the cursor to its first column."""
    return _ERASE_LINE + column(1)


def clear_lines(count: int, direction: str = "up") -> str:
    """Erase *count* rows, starting at the current one.

    The cursor walks *direction* (``"up"`` or ``"down"``) between rows and
    ends on the last row cleared.
    """
    if direction not in ("up", "down"):
        raise ValueError(f"Unknown direction: {direction!r}")
    move = up if direction == "up" else down
    parts = []
    for i in range(count):
        parts.append(clear_line())
        if i != count - 1:
            parts.append(move(1))
    return "".join(parts)
