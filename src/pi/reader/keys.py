"""Key identities, terminal key tables and key event classification.

Raw input decoded by :mod:`pi.reader.decoder` is a string holding either a
single character or a complete escape sequence. :func:`classify` turns it
into a :class:`KeyEvent` carrying a :class:`Key` (a closed
:class:`KeyName` identity plus a :class:`Modifier` bit set), the literal
value and a snapshot of the line being edited.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag

ESC = "\x1b"
CSI = "\x1b["
SS3 = "\x1bO"

# ---------------------------------------------------------------------------
# Key identities
# ---------------------------------------------------------------------------


class KeyName(str, Enum):
    """Symbolic identity of a key, decided once by :func:`classify`."""

    # Printable classes; the character itself is carried as ``Key.value``
    ALPHA = "alpha"
    NUM = "num"
    SPACE = "space"

    # Unrecognized input, never triggers a named event
    IGNORE = "ignore"

    TAB = "tab"
    BACK_TAB = "back_tab"
    RETURN = "return"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    INSERT = "insert"
    DELETE = "delete"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    CLEAR = "clear"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    F1 = "f1"
    F2 = "f2"
    F3 = "f3"
    F4 = "f4"
    F5 = "f5"
    F6 = "f6"
    F7 = "f7"
    F8 = "f8"
    F9 = "f9"
    F10 = "f10"
    F11 = "f11"
    F12 = "f12"

    CTRL_A = "ctrl_a"
    CTRL_B = "ctrl_b"
    CTRL_C = "ctrl_c"
    CTRL_D = "ctrl_d"
    CTRL_E = "ctrl_e"
    CTRL_F = "ctrl_f"
    CTRL_G = "ctrl_g"
    CTRL_H = "ctrl_h"
    CTRL_I = "ctrl_i"
    CTRL_J = "ctrl_j"
    CTRL_K = "ctrl_k"
    CTRL_L = "ctrl_l"
    CTRL_M = "ctrl_m"
    CTRL_N = "ctrl_n"
    CTRL_O = "ctrl_o"
    CTRL_P = "ctrl_p"
    CTRL_Q = "ctrl_q"
    CTRL_R = "ctrl_r"
    CTRL_S = "ctrl_s"
    CTRL_T = "ctrl_t"
    CTRL_U = "ctrl_u"
    CTRL_V = "ctrl_v"
    CTRL_W = "ctrl_w"
    CTRL_X = "ctrl_x"
    CTRL_Y = "ctrl_y"
    CTRL_Z = "ctrl_z"
    CTRL_SPACE = "ctrl_space"
    CTRL_BACKSLASH = "ctrl_backslash"
    CTRL_SQUARE_CLOSE = "ctrl_square_close"
    CTRL_CARET = "ctrl_caret"
    CTRL_UNDERSCORE = "ctrl_underscore"

    @property
    def printable(self) -> bool:
        return self in _PRINTABLE_NAMES

    @property
    def control_char(self) -> bool:
        """True for the ``ctrl_*`` variants produced by a single C0 byte."""
        return self.value.startswith("ctrl_")


_PRINTABLE_NAMES = frozenset({KeyName.ALPHA, KeyName.NUM, KeyName.SPACE})


class Modifier(Flag):
    NONE = 0
    SHIFT = 1
    META = 2
    CTRL = 4


# xterm modifier parameter (the ``5`` in ``ESC [1;5A``) -> modifier set
_XTERM_MODIFIERS: dict[int, Modifier] = {
    2: Modifier.SHIFT,
    3: Modifier.META,
    4: Modifier.SHIFT | Modifier.META,
    5: Modifier.CTRL,
    6: Modifier.CTRL | Modifier.SHIFT,
    7: Modifier.CTRL | Modifier.META,
    8: Modifier.CTRL | Modifier.SHIFT | Modifier.META,
}

_MODIFIER_PREFIXES: tuple[tuple[Modifier, str], ...] = (
    (Modifier.CTRL, "ctrl"),
    (Modifier.META, "meta"),
    (Modifier.SHIFT, "shift"),
)


@dataclass(frozen=True)
class Key:
    """A key identity with its modifier set.

    ``value`` holds the character for the printable classes
    (``alpha``, ``num``, ``space``) and is ``None`` otherwise.
    """

    name: KeyName
    modifiers: Modifier = Modifier.NONE
    value: str | None = None

    @property
    def ctrl(self) -> bool:
        return bool(self.modifiers & Modifier.CTRL)

    @property
    def shift(self) -> bool:
        return bool(self.modifiers & Modifier.SHIFT)

    @property
    def meta(self) -> bool:
        return bool(self.modifiers & Modifier.META)

    @property
    def id(self) -> str:
        """Identifier used to build event names, e.g. ``up`` or ``ctrl_left``.

        Modifiers are spelled out only for named keys whose identity does
        not already encode them; an upper case letter is still ``alpha``.
        """
        if self.name.control_char or self.name is KeyName.BACK_TAB:
            return self.name.value
        if self.name.printable and not (self.ctrl or self.meta):
            return self.name.value
        parts = [prefix for flag, prefix in _MODIFIER_PREFIXES if self.modifiers & flag]
        parts.append(self.name.value)
        return "_".join(parts)

    @property
    def combination(self) -> bool:
        """True when the key is a control combination rather than text."""
        if self.ctrl or self.meta:
            return True
        return self.shift and not self.name.printable


# ---------------------------------------------------------------------------
# Key tables
# ---------------------------------------------------------------------------


def _ctrl_keys() -> dict[str, Key]:
    keys: dict[str, Key] = {}
    for offset in range(26):
        letter = chr(ord("a") + offset)
        keys[chr(offset + 1)] = Key(KeyName(f"ctrl_{letter}"), Modifier.CTRL)
    keys["\x00"] = Key(KeyName.CTRL_SPACE, Modifier.CTRL)
    keys["\x1c"] = Key(KeyName.CTRL_BACKSLASH, Modifier.CTRL)
    keys["\x1d"] = Key(KeyName.CTRL_SQUARE_CLOSE, Modifier.CTRL)
    keys["\x1e"] = Key(KeyName.CTRL_CARET, Modifier.CTRL)
    keys["\x1f"] = Key(KeyName.CTRL_UNDERSCORE, Modifier.CTRL)
    return keys


CTRL_KEYS: dict[str, Key] = _ctrl_keys()

# Single-byte and unmodified escape sequences. Entries here win over the
# control key table, so "\t" is tab rather than ctrl_i.
LEGACY_KEY_SEQUENCES: dict[str, KeyName] = {
    " ": KeyName.SPACE,
    "\t": KeyName.TAB,
    "\r": KeyName.RETURN,
    "\n": KeyName.ENTER,
    "\x1b": KeyName.ESCAPE,
    "\x7f": KeyName.BACKSPACE,
    "\x1b[A": KeyName.UP,
    "\x1b[B": KeyName.DOWN,
    "\x1b[C": KeyName.RIGHT,
    "\x1b[D": KeyName.LEFT,
    "\x1b[E": KeyName.CLEAR,
    "\x1b[H": KeyName.HOME,
    "\x1b[F": KeyName.END,
    "\x1bOA": KeyName.UP,
    "\x1bOB": KeyName.DOWN,
    "\x1bOC": KeyName.RIGHT,
    "\x1bOD": KeyName.LEFT,
    "\x1bOE": KeyName.CLEAR,
    "\x1bOH": KeyName.HOME,
    "\x1bOF": KeyName.END,
    "\x1b[1~": KeyName.HOME,
    "\x1b[2~": KeyName.INSERT,
    "\x1b[3~": KeyName.DELETE,
    "\x1b[4~": KeyName.END,
    "\x1b[5~": KeyName.PAGE_UP,
    "\x1b[6~": KeyName.PAGE_DOWN,
    "\x1b[7~": KeyName.HOME,
    "\x1b[8~": KeyName.END,
    "\x1bOP": KeyName.F1,
    "\x1bOQ": KeyName.F2,
    "\x1bOR": KeyName.F3,
    "\x1bOS": KeyName.F4,
    "\x1b[11~": KeyName.F1,
    "\x1b[12~": KeyName.F2,
    "\x1b[13~": KeyName.F3,
    "\x1b[14~": KeyName.F4,
    "\x1b[15~": KeyName.F5,
    "\x1b[17~": KeyName.F6,
    "\x1b[18~": KeyName.F7,
    "\x1b[19~": KeyName.F8,
    "\x1b[20~": KeyName.F9,
    "\x1b[21~": KeyName.F10,
    "\x1b[23~": KeyName.F11,
    "\x1b[24~": KeyName.F12,
}

# Final byte of "ESC [1;<mod><final>" sequences
_MODIFIED_LETTER_KEYS: dict[str, KeyName] = {
    "A": KeyName.UP,
    "B": KeyName.DOWN,
    "C": KeyName.RIGHT,
    "D": KeyName.LEFT,
    "H": KeyName.HOME,
    "F": KeyName.END,
    "P": KeyName.F1,
    "Q": KeyName.F2,
    "R": KeyName.F3,
    "S": KeyName.F4,
}

# Number of "ESC [<n>;<mod>~" sequences
_MODIFIED_TILDE_KEYS: dict[int, KeyName] = {
    2: KeyName.INSERT,
    3: KeyName.DELETE,
    5: KeyName.PAGE_UP,
    6: KeyName.PAGE_DOWN,
    15: KeyName.F5,
    17: KeyName.F6,
    18: KeyName.F7,
    19: KeyName.F8,
    20: KeyName.F9,
    21: KeyName.F10,
    23: KeyName.F11,
    24: KeyName.F12,
}


def _modified_sequences() -> dict[str, Key]:
    keys: dict[str, Key] = {}
    for param, modifiers in _XTERM_MODIFIERS.items():
        for final, name in _MODIFIED_LETTER_KEYS.items():
            keys[f"{CSI}1;{param}{final}"] = Key(name, modifiers)
        for number, name in _MODIFIED_TILDE_KEYS.items():
            keys[f"{CSI}{number};{param}~"] = Key(name, modifiers)
    for final in "PQRS":
        for param, modifiers in _XTERM_MODIFIERS.items():
            keys[f"{SS3}{param}{final}"] = Key(_MODIFIED_LETTER_KEYS[final], modifiers)
    return keys


def build_keys() -> dict[str, Key]:
    """Return the POSIX key table: control bytes plus escape sequences."""
    keys = dict(CTRL_KEYS)
    keys.update(_modified_sequences())
    for seq, name in LEGACY_KEY_SEQUENCES.items():
        keys[seq] = Key(name)
    keys[f"{CSI}Z"] = Key(KeyName.BACK_TAB, Modifier.SHIFT)
    return keys


# Windows console: extended keys arrive as "\x00" or "\xe0" plus a scan code
WIN_KEY_SEQUENCES: dict[str, KeyName] = {
    " ": KeyName.SPACE,
    "\t": KeyName.TAB,
    "\r": KeyName.RETURN,
    "\n": KeyName.ENTER,
    "\x1b": KeyName.ESCAPE,
    "\x08": KeyName.BACKSPACE,
    "\x00;": KeyName.F1,
    "\x00<": KeyName.F2,
    "\x00=": KeyName.F3,
    "\x00>": KeyName.F4,
    "\x00?": KeyName.F5,
    "\x00@": KeyName.F6,
    "\x00A": KeyName.F7,
    "\x00B": KeyName.F8,
    "\x00C": KeyName.F9,
    "\x00D": KeyName.F10,
    "\xe0\x85": KeyName.F11,
    "\xe0\x86": KeyName.F12,
    "\xe0H": KeyName.UP,
    "\xe0P": KeyName.DOWN,
    "\xe0M": KeyName.RIGHT,
    "\xe0K": KeyName.LEFT,
    "\xe0G": KeyName.HOME,
    "\xe0O": KeyName.END,
    "\xe0R": KeyName.INSERT,
    "\xe0S": KeyName.DELETE,
    "\xe0I": KeyName.PAGE_UP,
    "\xe0Q": KeyName.PAGE_DOWN,
}


def build_win_keys() -> dict[str, Key]:
    """Return the Windows console key table."""
    keys = dict(CTRL_KEYS)
    for seq, name in WIN_KEY_SEQUENCES.items():
        keys[seq] = Key(name)
    return keys


# ---------------------------------------------------------------------------
# Key events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """A decoded keypress as seen by event listeners.

    ``line`` is the rendered line (prompt and text) at publish time.
    """

    value: str
    key: Key
    line: str = ""

    @property
    def trigger(self) -> bool:
        """Whether the key publishes its own ``key<id>`` event."""
        return self.key.name is not KeyName.IGNORE

    @property
    def event_name(self) -> str:
        return f"key{self.key.id}"

    @property
    def control(self) -> bool:
        """True for control combinations and unrecognized escape sequences."""
        if self.key.combination:
            return True
        return self.key.name is KeyName.IGNORE and len(self.value) > 1 and self.value.startswith(ESC)


def classify(keys: dict[str, Key], char: str, line: str = "") -> KeyEvent:
    """Map decoded input *char* to a :class:`KeyEvent`.

    Pure: the key table and line snapshot are only read.
    """
    if len(char) == 1 and char.isalpha():
        modifiers = Modifier.SHIFT if char.isupper() else Modifier.NONE
        key = Key(KeyName.ALPHA, modifiers, char)
    elif len(char) == 1 and char.isdigit():
        key = Key(KeyName.NUM, value=char)
    elif char in keys:
        key = keys[char]
        if key.name is KeyName.SPACE:
            key = Key(KeyName.SPACE, key.modifiers, char)
    elif len(char) == 2 and char[0] == ESC and char[1].isprintable():
        # Meta (Alt) + printable character
        inner = classify(keys, char[1]).key
        key = Key(inner.name, inner.modifiers | Modifier.META, inner.value)
    else:
        key = Key(KeyName.IGNORE)
    return KeyEvent(value=char, key=key, line=line)
