"""Reader - line editing orchestrator.

Ties the decoder, key classification, event bus, line buffer, history and
completer together into the ``read_keypress``/``read_line``/``read_multiline``
loops and redraws the edited line after every key.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import IO, Any, Callable, Iterator, Mapping

from pi.reader import cursor
from pi.reader.completer import Completer, CompletionEvent, CompletionHandler, Direction
from pi.reader.config import ReaderConfig
from pi.reader.console import IS_WINDOWS, select_console, terminal_width
from pi.reader.decoder import Decoder, codes_to_str
from pi.reader.errors import InputInterrupt
from pi.reader.events import EventHandler, EventBus, KeyListener
from pi.reader.history import History
from pi.reader.keys import KeyEvent, KeyName, classify
from pi.reader.line import Line
from pi.reader.utils import visible_width

logger = logging.getLogger(__name__)

# Key codes
CARRIAGE_RETURN = 13
NEWLINE = 10
BACKSPACE = 8
DELETE = 127

_LINE_ENDINGS = (CARRIAGE_RETURN, NEWLINE)


@dataclass
class _ReadState:
    """Per-call state of a single ``read_line``."""

    buffer: str = ""  # text typed before history navigation started
    navigating: bool = False
    completing: bool = False


class Reader:
    """Reads keypresses and edited lines from a terminal.

    Streams, environment and terminal width are injected; ``None`` picks
    ``sys.stdin``, ``sys.stdout``, ``os.environ`` and the width of the
    output terminal. Options are given either as a :class:`ReaderConfig`
    or as its fields in keyword form::

        reader = Reader(completion_handler=lambda word: ["add", "commit"])
        reader.on("keyctrl_x", lambda event: ...)
        answer = reader.read_line(">> ")
    """

    def __init__(
        self,
        input: IO[str] | None = None,
        output: IO[str] | None = None,
        env: Mapping[str, str] | None = None,
        *,
        screen_width: int | None = None,
        config: ReaderConfig | None = None,
        **options: Any,
    ) -> None:
        if config is not None and options:
            raise TypeError("Pass either config or keyword options, not both")
        # Per-reader copy, the completion setters mutate it
        self.config = replace(config) if config is not None else ReaderConfig(**options)

        self.input = input if input is not None else sys.stdin
        self.output = output if output is not None else sys.stdout
        self.env = env if env is not None else os.environ
        self._screen_width = screen_width

        self.console = select_console(self.input, self.env)
        self.decoder = Decoder(self.console, self._handle_interrupt)
        self.history = History(
            self.config.history_size,
            cycle=self.config.history_cycle,
            duplicates=self.config.history_duplicates,
            exclude=self.config.history_exclude,
        )
        self.completer = Completer(
            self.config.completion_handler, suffix=self.config.completion_suffix
        )
        self.events = EventBus()
        self._stop = False  # set when an exit key ends the input

    # -- configuration ------------------------------------------------------

    @property
    def track_history(self) -> bool:
        return self.config.track_history

    @property
    def completion_handler(self) -> CompletionHandler | None:
        return self.completer.handler

    @completion_handler.setter
    def completion_handler(self, handler: CompletionHandler | None) -> None:
        if handler is not None and not callable(handler):
            raise ValueError("completion_handler must be callable")
        self.config.completion_handler = handler
        self.completer.handler = handler

    @property
    def completion_suffix(self) -> str:
        return self.completer.suffix

    @completion_suffix.setter
    def completion_suffix(self, suffix: str) -> None:
        self.config.completion_suffix = suffix
        self.completer.suffix = suffix

    @property
    def screen_width(self) -> int:
        if self._screen_width is not None and self._screen_width > 0:
            return self._screen_width
        return terminal_width(self.output, self.env)

    # -- events -------------------------------------------------------------

    def on(self, event_name: str, handler: EventHandler) -> Callable[[], None]:
        """Call *handler* with each *event_name* event. Returns unsubscribe function."""
        return self.events.on(event_name, handler)

    def subscribe(self, listener: KeyListener) -> Callable[[], None]:
        """Send every event to ``listener.handle``. Returns unsubscribe function."""
        return self.events.subscribe(listener)

    def unsubscribe(self, listener: object) -> None:
        self.events.unsubscribe(listener)

    @contextmanager
    def subscribed(self, listener: KeyListener) -> Iterator[KeyListener]:
        """Subscribe *listener* for the duration of a ``with`` block."""
        with self.events.subscribed(listener):
            yield listener

    def trigger(self, event_name: str, event: Any) -> None:
        self.events.publish(event_name, event)

    def _publish_key(self, char: str, line: str = "") -> KeyEvent:
        event = classify(self.console.keys, char, line)
        if event.trigger:
            self.trigger(event.event_name, event)
        self.trigger("keypress", event)
        return event

    # -- reading ------------------------------------------------------------

    def read_keypress(self, echo: bool = False, raw: bool = True, nonblock: bool = False) -> str | None:
        """Read a single key, including multi-character escape sequences.

        Publishes the key's events and returns the raw token, or None at
        end of input (or when *nonblock* and no key is pending).
        """
        char = self.decoder.decode_str(echo=echo, raw=raw, nonblock=nonblock)
        if char is not None:
            self._publish_key(char)
        return char

    read_char = read_keypress

    def read_line(
        self,
        prompt: str = "",
        *,
        value: str = "",
        echo: bool | None = None,
        raw: bool | None = None,
        nonblock: bool = False,
    ) -> str:
        """Read one line of input, echoing and redrawing it as it is edited.

        The returned text keeps its line ending; it lacks one when the read
        ended on an exit key or at end of input.
        """
        echo = self.config.echo if echo is None else echo
        raw = self.config.raw if raw is None else raw
        screen_width = self.screen_width
        line = Line(value, prompt=prompt, screen_width=screen_width)
        state = _ReadState()
        self.history.reset()

        self.output.write(str(line))

        while True:
            codes = self.decoder.decode(echo=echo, raw=raw, nonblock=nonblock)
            if not codes:
                break
            code = codes[0]
            char = codes_to_str(codes)
            event = classify(self.console.keys, char)

            if event.key.id in self.config.exit_keys:
                self._stop = True
                self._publish_key(char, str(line))
                break

            if raw and echo:
                self.clear_display(line, screen_width)

            char = self._apply_key(line, event, code, state, raw)

            if echo and not raw and self._is_backspace(event, code):
                self.output.write(" " + ("" if line.at_start else "\b"))

            # Listeners see the line as this key left it, before the redraw
            self._publish_key(char, str(line))

            if raw and echo:
                self.output.write(str(line))
                if char == "\n":
                    line.move_to_start()
                elif not line.at_end:
                    self.output.write(cursor.backward(line.tail_size))
            self.output.flush()

            if code in _LINE_ENDINGS:
                if not echo:
                    self.output.write("\n")
                break

        if self.track_history and echo:
            self.history.push(line.text.rstrip())

        return line.text

    def _apply_key(self, line: Line, event: KeyEvent, code: int, state: _ReadState, raw: bool) -> str:
        """Edit *line* for one key. Returns the character that was typed."""
        key = event.key
        char = event.value
        was_completing, state.completing = state.completing, False

        if self._is_backspace(event, code):
            if not line.at_start:
                line.remove(1)
        elif key.name is KeyName.DELETE or code == DELETE:
            line.delete()
        elif key.name in (KeyName.TAB, KeyName.BACK_TAB) and self.completer.handler is not None:
            direction = Direction.PREVIOUS if key.name is KeyName.BACK_TAB else Direction.NEXT
            completed = self.completer.complete(line, initial=not was_completing, direction=direction)
            if completed is not None:
                state.completing = True
                self.trigger("complete", CompletionEvent.from_completer(self.completer, completed, str(line)))
        elif key.name is KeyName.ESCAPE and was_completing:
            self.completer.cancel(line)
        elif event.control:
            pass
        elif key.name is KeyName.UP:
            self._history_previous(line, state)
        elif key.name is KeyName.DOWN:
            self._history_next(line, state)
        elif key.name is KeyName.LEFT:
            line.move_left()
        elif key.name is KeyName.RIGHT:
            line.move_right()
        elif key.name is KeyName.HOME:
            line.move_to_start()
        elif key.name is KeyName.END:
            line.move_to_end()
        else:
            if raw and code in _LINE_ENDINGS:
                char = "\n"
                line.move_to_end()
            line.insert(char)
        return char

    @staticmethod
    def _is_backspace(event: KeyEvent, code: int) -> bool:
        return event.key.name is KeyName.BACKSPACE or code == BACKSPACE

    def _history_previous(self, line: Line, state: _ReadState) -> None:
        if not self.track_history or not self.history.has_previous():
            return
        if not state.navigating:
            state.buffer = line.text
            state.navigating = True
        elif line.editing:
            self.history.replace(line.text)
        self.history.previous()
        line.replace(self.history.get() or "")

    def _history_next(self, line: Line, state: _ReadState) -> None:
        if not self.track_history or not state.navigating or not self.history.has_next():
            return
        if line.editing:
            self.history.replace(line.text)
        self.history.next()
        entry = self.history.get()
        if entry is None:
            line.replace(state.buffer)
            state.navigating = False
        else:
            line.replace(entry)

    def read_multiline(
        self,
        prompt: str = "",
        *,
        value: str = "",
        echo: bool | None = None,
        raw: bool | None = None,
        nonblock: bool = False,
        callback: Callable[[str], None] | None = None,
    ) -> list[str]:
        """Read lines until an exit key or end of input.

        Blank lines are skipped. With *callback* each line is passed to it
        instead of being collected, and the returned list is empty.
        """
        self._stop = False
        lines: list[str] = []

        while True:
            text = self.read_line(prompt, value=value, echo=echo, raw=raw, nonblock=nonblock)
            value = ""
            if not text:
                break
            if not text.strip() and not self._stop:
                continue

            if callback is not None:
                callback(text)
            else:
                lines.append(text)
            if self._stop or not text.endswith("\n"):
                break

        return lines

    read_lines = read_multiline

    # -- rendering ----------------------------------------------------------

    def clear_display(self, line: Line, screen_width: int | None = None) -> None:
        """Erase every row the rendered *line* occupies.

        Moves down to the last row first when the cursor sits on an earlier
        one, so lines wider than the terminal are cleared completely.
        """
        width = screen_width if screen_width and screen_width > 0 else self.screen_width
        total_lines = self.count_screen_lines(line.size, width)
        current_line = self.count_screen_lines(line.prompt_size + line.cursor_offset, width)
        lines_down = total_lines - current_line

        if lines_down:
            self.output.write(cursor.down(lines_down))
        self.output.write(cursor.clear_lines(total_lines))

    def count_screen_lines(self, line_or_size: int | str | Line, screen_width: int | None = None) -> int:
        """Number of terminal rows a line of the given display width takes up.

        The cursor after a full row still sits on that row, so exactly
        ``screen_width`` columns count as one row.
        """
        if isinstance(line_or_size, int):
            size = line_or_size
        elif isinstance(line_or_size, Line):
            size = line_or_size.size
        else:
            size = visible_width(line_or_size)
        width = screen_width if screen_width and screen_width > 0 else self.screen_width
        new_chars = -1 if IS_WINDOWS else 1
        return 1 + max(0, (size - new_chars) // width)

    # -- interrupts ---------------------------------------------------------

    def _handle_interrupt(self) -> None:
        policy = self.config.interrupt
        logger.debug("Interrupt key received, policy: %r", policy)
        if callable(policy):
            policy()
        elif policy == "signal":
            os.kill(os.getpid(), signal.SIGINT)
        elif policy == "exit":
            sys.exit(130)
        elif policy == "noop":
            return
        else:
            raise InputInterrupt()

    def __repr__(self) -> str:
        return f"<Reader input={self.input!r} output={self.output!r}>"
