"""Group console characters into complete key tokens.

A token is either a single character or a whole escape sequence. After a
character that may start a sequence (``ESC``, ``ESC [``, ``ESC O`` or the
platform's equivalents) the decoder keeps reading with a short timeout
until a final byte (``0x40``-``0x7E``) arrives, the input pauses or ends,
or the token reaches :data:`MAX_SEQUENCE_LENGTH`.
"""

from __future__ import annotations

import logging
from typing import Callable

from pi.reader.console import CharSource

logger = logging.getLogger(__name__)

CTRL_C = "\x03"

MAX_SEQUENCE_LENGTH = 32

_FINAL_BYTES = range(0x40, 0x7F)


def codes_to_str(codes: list[int]) -> str:
    return "".join(chr(code) for code in codes)


class Decoder:
    """Reads one key token at a time from a console.

    *on_interrupt* runs whenever a Ctrl+C character is read; it may raise
    to abort the read, or return to let decoding continue.
    """

    def __init__(self, console: CharSource, on_interrupt: Callable[[], None]) -> None:
        self.console = console
        self._on_interrupt = on_interrupt

    def decode(self, echo: bool = True, raw: bool = False, nonblock: bool = False) -> list[int] | None:
        """Return the codepoints of the next token, or None at end of input."""
        char = self._read(echo, raw, nonblock)
        if char is None:
            return None

        codes = [ord(char)]
        while self._incomplete(codes):
            if len(codes) >= MAX_SEQUENCE_LENGTH:
                logger.debug("Escape sequence truncated at %d codes: %r", len(codes), codes)
                break
            char = self._read(echo, raw, nonblock=True)
            if char is None:
                break
            codes.append(ord(char))
        return codes

    def decode_str(self, echo: bool = True, raw: bool = False, nonblock: bool = False) -> str | None:
        codes = self.decode(echo=echo, raw=raw, nonblock=nonblock)
        return None if codes is None else codes_to_str(codes)

    def _read(self, echo: bool, raw: bool, nonblock: bool) -> str | None:
        char = self.console.get_char(echo=echo, raw=raw, nonblock=nonblock)
        if char == CTRL_C:
            self._on_interrupt()
        return char

    def _incomplete(self, codes: list[int]) -> bool:
        return any(_continues(codes, escape) for escape in self.console.escape_codes)


def _continues(codes: list[int], escape: list[int]) -> bool:
    """Whether *codes* may still grow into a sequence starting with *escape*."""
    if codes[0] != escape[0]:
        return False
    if not set(codes) - set(escape):
        return True
    return not set(escape) - set(codes) and codes[-1] not in _FINAL_BYTES
