"""Terminal text utilities: ANSI stripping and display width measurement."""

from __future__ import annotations

import re

import wcwidth as _wcwidth

# Styling sequences embedded in prompts or pasted text, optionally wrapped
# in the brackets some shells emit around non-printing regions.
ANSI_MATCHER = re.compile(r"(\[)?\033(\[)?[;?\d]*[\dA-Za-z](\])?")

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from *text*."""
    return ANSI_MATCHER.sub("", text)


def char_width(ch: str) -> int:
    """Return the terminal column width of a single codepoint.

    Control characters and combining marks occupy no columns.
    """
    cp = ord(ch)
    if cp < 0x20 or (0x7F <= cp <= 0x9F):
        return 0
    return max(_wcwidth.wcwidth(ch), 0)


def visible_width(text: str) -> int:
    """Return the number of terminal columns *text* occupies once printed."""
    if not text:
        return 0

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    if text.isascii() and text.isprintable():
        return _cache_width(text, len(text))

    width = sum(char_width(ch) for ch in strip_ansi(text))
    return _cache_width(text, width)
