"""Character sources for the reader.

A console reads one character at a time from an input stream, optionally
with the terminal switched to raw and/or no-echo mode for the duration of
the read, and knows the key table and escape prefixes of its platform.
"""

from __future__ import annotations

import codecs
import os
import time
from contextlib import contextmanager
from typing import IO, Iterator, Mapping, Protocol

from pi.reader.keys import CSI, ESC, SS3, Key, build_keys, build_win_keys

IS_WINDOWS = os.name == "nt"

if not IS_WINDOWS:
    import select
    import termios
    import tty

# Environment variable forcing the portable byte-oriented console backend
TEST_ENV_VAR = "PI_READER_TEST"

# Seconds to wait for the rest of an escape sequence
TIMEOUT = 0.1

DEFAULT_COLUMNS = 80


class CharSource(Protocol):
    """What the decoder needs from a console."""

    keys: dict[str, Key]
    escape_codes: list[list[int]]

    def get_char(
        self, echo: bool = True, raw: bool = False, nonblock: bool = False
    ) -> str | None: ...


def _tty_fd(stream: object) -> int | None:
    try:
        if stream.isatty():  # type: ignore[attr-defined]
            return stream.fileno()  # type: ignore[attr-defined]
    except (AttributeError, ValueError, OSError):
        pass
    return None


def _file_fd(stream: object) -> int | None:
    try:
        return stream.fileno()  # type: ignore[attr-defined]
    except (AttributeError, ValueError, OSError):
        return None


def terminal_width(output: object, env: Mapping[str, str] | None = None) -> int:
    """Columns of the terminal *output* writes to.

    Falls back to ``COLUMNS`` from *env* and then to 80 columns when the
    output is not a terminal.
    """
    fd = _file_fd(output)
    if fd is not None:
        try:
            columns = os.get_terminal_size(fd).columns
        except (ValueError, OSError):
            columns = 0
        # A pty whose size was never set reports 0 columns
        if columns > 0:
            return columns
    value = (env or {}).get("COLUMNS", "")
    if value.isdigit() and int(value) > 0:
        return int(value)
    return DEFAULT_COLUMNS


# ---------------------------------------------------------------------------
# Terminal modes
# ---------------------------------------------------------------------------


class Mode:
    """Scoped raw and echo mode switches for a terminal input stream.

    Both are no-ops unless the stream is a TTY; the previous terminal
    attributes are restored on exit from the ``with`` block, including on
    exceptions.
    """

    def __init__(self, input: object) -> None:
        self._input = input

    @contextmanager
    def raw(self, is_on: bool = True) -> Iterator[None]:
        fd = _tty_fd(self._input) if is_on and not IS_WINDOWS else None
        if fd is None:
            yield
            return
        saved = termios.tcgetattr(fd)
        try:
            tty.setraw(fd, termios.TCSANOW)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)

    @contextmanager
    def echo(self, is_on: bool = True) -> Iterator[None]:
        fd = _tty_fd(self._input) if not is_on and not IS_WINDOWS else None
        if fd is None:
            yield
            return
        saved = termios.tcgetattr(fd)
        attrs = termios.tcgetattr(fd)
        attrs[3] &= ~termios.ECHO  # c_lflag
        try:
            termios.tcsetattr(fd, termios.TCSANOW, attrs)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)


# ---------------------------------------------------------------------------
# POSIX console
# ---------------------------------------------------------------------------


class Console:
    """Byte-oriented console reading UTF-8 input one character at a time.

    Streams with a file descriptor are read with :func:`os.read` so that a
    bounded wait can be applied; other streams (e.g. :class:`io.StringIO`)
    are read with ``read(1)``.
    """

    def __init__(self, input: IO[str]) -> None:
        self.input = input
        self.mode = Mode(input)
        self.keys: dict[str, Key] = build_keys()
        self.escape_codes: list[list[int]] = [
            [ord(ESC)],
            [ord(c) for c in CSI],
            [ord(c) for c in SS3],
        ]
        self._fd = None if IS_WINDOWS else _file_fd(input)
        self._decoder = codecs.getincrementaldecoder("utf-8")("replace")

    def get_char(self, echo: bool = True, raw: bool = False, nonblock: bool = False) -> str | None:
        """Read one character, or None at end of input.

        With *nonblock* the read gives up after :data:`TIMEOUT` seconds.
        """
        with self.mode.raw(raw), self.mode.echo(echo):
            if self._fd is None:
                return self.input.read(1) or None
            return self._read_fd(nonblock)

    def _read_fd(self, nonblock: bool) -> str | None:
        assert self._fd is not None
        if nonblock:
            readable, _, _ = select.select([self._fd], [], [], TIMEOUT)
            if not readable:
                return None
        while True:
            data = os.read(self._fd, 1)
            if not data:
                return self._decoder.decode(b"", final=True) or None
            char = self._decoder.decode(data)
            if char:
                return char


# ---------------------------------------------------------------------------
# Windows console
# ---------------------------------------------------------------------------


class WinConsole:
    """Console backed by :mod:`msvcrt` keyboard reads."""

    def __init__(self, input: IO[str]) -> None:
        import msvcrt

        self._msvcrt = msvcrt
        self.input = input
        self.keys: dict[str, Key] = build_win_keys()
        # Extended keys are prefixed with NUL or 0xE0
        self.escape_codes: list[list[int]] = [[0], [224]]

    def get_char(self, echo: bool = True, raw: bool = False, nonblock: bool = False) -> str | None:
        if not raw:
            return self.input.read(1) or None
        if nonblock and not self._wait_for_key():
            return None
        return self._msvcrt.getwche() if echo else self._msvcrt.getwch()

    def _wait_for_key(self) -> bool:
        deadline = time.monotonic() + TIMEOUT
        while not self._msvcrt.kbhit():
            if time.monotonic() >= deadline:
                return False
            time.sleep(0.01)
        return True


def select_console(input: IO[str], env: Mapping[str, str]) -> Console | WinConsole:
    """Pick the console for this platform.

    ``PI_READER_TEST`` in *env* forces the portable :class:`Console`.
    """
    if IS_WINDOWS and not env.get(TEST_ENV_VAR):
        return WinConsole(input)
    return Console(input)
