"""Reader configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Union

from pi.reader.completer import CompletionHandler
from pi.reader.history import DEFAULT_SIZE, exclude_blank

INTERRUPT_POLICIES = ("error", "signal", "exit", "noop")

InterruptPolicy = Union[str, Callable[[], None]]

DEFAULT_EXIT_KEYS: tuple[str, ...] = ("ctrl_d", "ctrl_z")


@dataclass
class ReaderConfig:
    """Options controlling input handling, history and completion.

    ``interrupt`` decides what Ctrl+C does: ``"error"`` raises
    :class:`~pi.reader.errors.InputInterrupt`, ``"signal"`` sends SIGINT to
    the process, ``"exit"`` exits with status 130, ``"noop"`` ignores it,
    and a callable is invoked instead.
    """

    interrupt: InterruptPolicy = "error"
    track_history: bool = True
    history_size: int = DEFAULT_SIZE
    history_cycle: bool = False
    history_duplicates: bool = False
    history_exclude: Callable[[str], bool] = exclude_blank
    completion_handler: CompletionHandler | None = None
    completion_suffix: str = ""
    exit_keys: Iterable[str] = field(default_factory=lambda: DEFAULT_EXIT_KEYS)
    echo: bool = True
    raw: bool = True

    def __post_init__(self) -> None:
        if not callable(self.interrupt) and self.interrupt not in INTERRUPT_POLICIES:
            raise ValueError(
                f"Unknown interrupt policy {self.interrupt!r}, "
                f"expected one of {', '.join(INTERRUPT_POLICIES)} or a callable"
            )
        if self.history_size <= 0:
            raise ValueError(f"history_size must be positive, got {self.history_size}")
        if self.completion_handler is not None and not callable(self.completion_handler):
            raise ValueError("completion_handler must be callable")
        if isinstance(self.exit_keys, str):
            self.exit_keys = (self.exit_keys,)
        # Normalise so KeyName members and plain strings compare alike
        self.exit_keys = frozenset(str(getattr(k, "value", k)) for k in self.exit_keys)
