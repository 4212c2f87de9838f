#!/usr/bin/env python3

# Copyright (c) 2026 rawprompt contributors
# SPDX-License-Identifier: ISC

"""
rawterm -- raw-mode terminal I/O for inline prompts

Everything rawprompt needs from the terminal, and nothing more: entering and
leaving raw mode, reading keystrokes byte-for-byte, decoding them into
symbolic keys, relative cursor movement and line erasing, and SGR styling.

Unlike a full-screen UI, prompts are drawn inline below the shell prompt.
There is no alternate screen and no absolute positioning: every cursor move
is relative to where the previous frame left the cursor.

Zero external dependencies. Uses only Python stdlib: termios, select, os and
sys on Unix; ctypes and msvcrt on Windows.
"""

import codecs
import os
import sys

_IS_WINDOWS = os.name == "nt"

if not _IS_WINDOWS:
    import select
    import termios


# ---------------------------------------------------------------------------
# Colors and styles
# ---------------------------------------------------------------------------


class Color:
    """Foreground color: one of the 16 named colors or a 256-color index."""

    __slots__ = ("_index",)

    def __init__(self, index):
        self._index = index

    DEFAULT = None  # assigned below

    @staticmethod
    def index(n):
        """Create a color from the xterm 256-color palette."""
        if not 0 <= n <= 255:
            raise ValueError(f"color index {n} outside 0..255")
        return Color(n)

    def _sgr_fg(self):
        idx = self._index
        if idx is None:
            return "39"
        if idx < 8:
            return str(30 + idx)
        if idx < 16:
            return str(90 + idx - 8)
        return f"38;5;{idx}"

    def __eq__(self, other):
        if not isinstance(other, Color):
            return NotImplemented
        return self._index == other._index

    def __hash__(self):
        return hash(self._index)

    def __repr__(self):
        if self._index is None:
            return "Color.DEFAULT"
        return f"Color.index({self._index})"


Color.DEFAULT = Color(None)

# Lowercase name -> Color, for style strings
NAMED_COLORS = {}
for _i, _name in enumerate(
    ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")
):
    NAMED_COLORS[_name] = Color(_i)
    NAMED_COLORS["bright" + _name] = Color(_i + 8)
NAMED_COLORS["gray"] = NAMED_COLORS["grey"] = NAMED_COLORS["brightblack"]
NAMED_COLORS["purple"] = NAMED_COLORS["magenta"]
del _i, _name


class Style:
    """Immutable text style: foreground color plus attributes."""

    # Attribute name -> SGR parameter
    _ATTRS = (
        ("bold", "1"),
        ("dim", "2"),
        ("italic", "3"),
        ("underline", "4"),
        ("standout", "7"),
        ("strikethrough", "9"),
    )

    __slots__ = ("fg",) + tuple(name for name, _ in _ATTRS) + ("_sgr_cache",)

    def __init__(
        self,
        fg=None,
        bold=False,
        dim=False,
        italic=False,
        underline=False,
        standout=False,
        strikethrough=False,
    ):
        self.fg = fg if fg is not None else Color.DEFAULT
        self.bold = bold
        self.dim = dim
        self.italic = italic
        self.underline = underline
        self.standout = standout
        self.strikethrough = strikethrough
        self._sgr_cache = None

    def _key(self):
        return (self.fg,) + tuple(getattr(self, name) for name, _ in self._ATTRS)

    def sgr(self):
        """Return the SGR escape sequence for this style ("" for the default
        style)."""
        if self._sgr_cache is not None:
            return self._sgr_cache

        parts = []
        if self.fg != Color.DEFAULT:
            parts.append(self.fg._sgr_fg())
        for name, code in self._ATTRS:
            if getattr(self, name):
                parts.append(code)

        self._sgr_cache = "\x1b[{}m".format(";".join(parts)) if parts else ""
        return self._sgr_cache

    def apply(self, text):
        """Wrap 'text' in this style, resetting attributes afterwards."""
        sgr = self.sgr()
        if not sgr or not text:
            return text
        return f"{sgr}{text}\x1b[0m"

    def __eq__(self, other):
        if not isinstance(other, Style):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        parts = []
        if self.fg != Color.DEFAULT:
            parts.append(f"fg={self.fg}")
        parts.extend(name for name, _ in self._ATTRS if getattr(self, name))
        return "Style({})".format(", ".join(parts))


STYLE_DEFAULT = Style()


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


class Key:
    """Symbolic keys. Each value is the canonical sequence for the key, so a
    decoded key can be compared directly against these constants."""

    ENTER = "\n"
    CTRL_C = "\x03"
    CTRL_A = "\x01"
    CTRL_D = "\x04"
    CTRL_E = "\x05"
    CTRL_U = "\x15"
    TAB = "\t"
    BACKSPACE = "\x7f"
    ESCAPE = "\x1b"
    UP = "\x1b[A"
    DOWN = "\x1b[B"
    RIGHT = "\x1b[C"
    LEFT = "\x1b[D"
    HOME = "\x1b[H"
    END = "\x1b[F"
    DELETE = "\x1b[3~"
    PAGE_UP = "\x1b[5~"
    PAGE_DOWN = "\x1b[6~"
    SHIFT_TAB = "\x1b[Z"


# Variant sequences -> canonical Key value. Terminals disagree on several
# keys (xterm, rxvt, tmux, application cursor mode).
_KEY_SEQUENCES = {
    "\r": Key.ENTER,
    "\r\n": Key.ENTER,
    "\n": Key.ENTER,
    "\x08": Key.BACKSPACE,
    "\x7f": Key.BACKSPACE,
    # Arrow keys
    "\x1b[A": Key.UP,
    "\x1bOA": Key.UP,  # application mode
    "\x1b[B": Key.DOWN,
    "\x1bOB": Key.DOWN,
    "\x1b[C": Key.RIGHT,
    "\x1bOC": Key.RIGHT,
    "\x1b[D": Key.LEFT,
    "\x1bOD": Key.LEFT,
    # Home
    "\x1b[H": Key.HOME,  # xterm
    "\x1bOH": Key.HOME,  # application mode
    "\x1b[1~": Key.HOME,  # tmux/linux
    "\x1b[7~": Key.HOME,  # rxvt
    # End
    "\x1b[F": Key.END,  # xterm
    "\x1bOF": Key.END,  # application mode
    "\x1b[4~": Key.END,  # tmux/linux
    "\x1b[8~": Key.END,  # rxvt
    "\x1b[3~": Key.DELETE,
    "\x1b[5~": Key.PAGE_UP,
    "\x1b[6~": Key.PAGE_DOWN,
    "\x1b[Z": Key.SHIFT_TAB,
}


def _build_trie(sequences):
    """Build a trie (nested dict) from a sequence table. Leaves are stored
    under the None key so that a complete sequence can also be the prefix of
    a longer one ("\\r" and "\\r\\n")."""
    root = {}
    for seq, key in sequences.items():
        node = root
        for ch in seq:
            node = node.setdefault(ch, {})
        node[None] = key
    return root


_KEY_TRIE = _build_trie(_KEY_SEQUENCES)


def _walk(text):
    # Returns the trie node reached by 'text', or None on a dead end
    node = _KEY_TRIE
    for ch in text:
        node = node.get(ch)
        if node is None:
            return None
    return node


def decode(raw):
    """Decode one chunk read from the terminal into a key.

    Known sequences map to their Key constant. Anything else, including a
    sequence the trie doesn't know, comes back unchanged as literal text.
    A chunk is never split into several keys. Returns "" for end of input.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", "replace")

    node = _walk(raw)
    if node is not None and None in node:
        return node[None]
    return raw


def is_partial(raw):
    """True if 'raw' is a strict prefix of a known escape sequence, meaning
    the terminal may still be sending the rest of it."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", "replace")
    if not raw.startswith("\x1b"):
        return False
    node = _walk(raw)
    return node is not None and any(k is not None for k in node)


# ---------------------------------------------------------------------------
# Cursor control
# ---------------------------------------------------------------------------


class Cursor:
    """Control sequences for relative cursor movement and erasing.

    Holds no state: every method returns the sequence for the requested
    delta, and the caller decides when to write it.
    """

    def move(self, x, y=0):
        """Move 'x' columns right (left if negative) and 'y' rows down (up if
        negative)."""
        seq = ""
        if x < 0:
            seq += f"\x1b[{-x}D"
        elif x > 0:
            seq += f"\x1b[{x}C"
        if y < 0:
            seq += f"\x1b[{-y}A"
        elif y > 0:
            seq += f"\x1b[{y}B"
        return seq

    def hide(self):
        return "\x1b[?25l"

    def show(self):
        return "\x1b[?25h"

    def erase_lines(self, count):
        """Erase 'count' lines, starting at the cursor line and working
        upwards, and leave the cursor in column 1."""
        seq = ""
        for i in range(count):
            seq += "\x1b[2K"
            if i < count - 1:
                seq += "\x1b[1A"
        if count:
            seq += "\x1b[G"
        return seq

    def erase_down(self):
        """Erase from the cursor to the end of the screen."""
        return "\x1b[J"


# ---------------------------------------------------------------------------
# Terminal
# ---------------------------------------------------------------------------


class Terminal:
    """The controlling terminal: raw mode, key input and raw output.

    One instance should own raw mode at a time. Create it once and pass it to
    every prompt that runs in the process.
    """

    def __init__(self):
        if not _IS_WINDOWS:
            if not os.isatty(sys.stdin.fileno()):
                raise RuntimeError("stdin is not a terminal")
            if not os.isatty(sys.stdout.fileno()):
                raise RuntimeError("stdout is not a terminal")

        self._saved_mode = None

        if _IS_WINDOWS:
            import ctypes

            self._kernel32 = ctypes.windll.kernel32
            self._stdin_handle = self._kernel32.GetStdHandle(-10)
            self._stdout_handle = self._kernel32.GetStdHandle(-11)
        else:
            # UTF-8 incremental decoder for input
            self._decoder = codecs.getincrementaldecoder("utf-8")("replace")
            self._poller = select.poll()
            self._poller.register(sys.stdin.fileno(), select.POLLIN)

    @property
    def in_raw_mode(self):
        return self._saved_mode is not None

    def set_mode(self):
        """Enter raw mode: no canonical line editing, no signal keys, no
        echo. Ctrl-C arrives as a key instead of raising SIGINT."""
        if self._saved_mode is not None:
            raise RuntimeError("terminal is already in raw mode")

        if _IS_WINDOWS:
            self._saved_mode = self._set_mode_windows()
            return

        fd = sys.stdin.fileno()
        self._saved_mode = termios.tcgetattr(fd)
        new = termios.tcgetattr(fd)
        # LFLAG: clear ICANON, ECHO, ISIG, IEXTEN
        new[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG | termios.IEXTEN)
        # IFLAG: leave CR alone so Enter reads as "\r"; no XON/XOFF
        new[1] &= ~(termios.ICRNL | termios.INLCR | termios.IGNCR | termios.IXON)
        new[6][termios.VMIN] = 1
        new[6][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSANOW, new)

    def _set_mode_windows(self):
        import ctypes
        from ctypes import wintypes

        kernel32 = self._kernel32
        old_out = wintypes.DWORD()
        old_in = wintypes.DWORD()
        kernel32.GetConsoleMode(self._stdout_handle, ctypes.byref(old_out))
        kernel32.GetConsoleMode(self._stdin_handle, ctypes.byref(old_in))

        ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004
        ENABLE_VIRTUAL_TERMINAL_INPUT = 0x0200
        kernel32.SetConsoleMode(
            self._stdout_handle, old_out.value | ENABLE_VIRTUAL_TERMINAL_PROCESSING
        )
        # Clear ECHO, LINE and PROCESSED input so Ctrl-C is a key
        new_in = (old_in.value | ENABLE_VIRTUAL_TERMINAL_INPUT) & ~(
            0x0004 | 0x0002 | 0x0001
        )
        kernel32.SetConsoleMode(self._stdin_handle, new_in)
        return (old_out.value, old_in.value)

    def restore_mode(self):
        """Leave raw mode. Does nothing if raw mode isn't active, so every
        exit path can call it."""
        if self._saved_mode is None:
            return

        saved = self._saved_mode
        self._saved_mode = None

        if _IS_WINDOWS:
            self._kernel32.SetConsoleMode(self._stdout_handle, saved[0])
            self._kernel32.SetConsoleMode(self._stdin_handle, saved[1])
        else:
            termios.tcsetattr(sys.stdin.fileno(), termios.TCSANOW, saved)

    def read_key(self):
        """Block until input is available and return it as bytes.

        Returns b"" at end of input.
        """
        if _IS_WINDOWS:
            return self._read_key_windows()

        fd = sys.stdin.fileno()
        data = os.read(fd, 1024)
        if not data:
            return b""

        text = self._decoder.decode(data)

        # An escape sequence or a multi-byte character can arrive split
        # across reads. Wait briefly for the rest before handing over a
        # lone prefix.
        while is_partial(text) or self._pending_bytes():
            more = os.read(fd, 1024) if self._poller.poll(25) else b""
            if not more:
                break
            text += self._decoder.decode(more)

        # Still incomplete: flush as U+FFFD so the next key starts clean
        text += self._decoder.decode(b"", final=True)

        return text.encode("utf-8")

    def _pending_bytes(self):
        # Bytes of an unfinished UTF-8 character held by the decoder
        return self._decoder.getstate()[0]

    def _read_key_windows(self):
        import msvcrt
        import time

        chars = [msvcrt.getwch()]
        # Drain whatever the console already queued (rest of a VT sequence)
        deadline = time.monotonic() + 0.025
        while msvcrt.kbhit() or (
            is_partial("".join(chars)) and time.monotonic() < deadline
        ):
            if msvcrt.kbhit():
                chars.append(msvcrt.getwch())
            else:
                time.sleep(0.005)
        return "".join(chars).encode("utf-8")

    def write(self, text):
        """Write 'text' as-is and flush."""
        # stdout.buffer for binary safety: no newline translation here
        sys.stdout.buffer.write(text.encode("utf-8"))
        sys.stdout.buffer.flush()

    def exit(self):
        """Terminate the process. Callers restore the terminal first."""
        sys.exit(1)


class FakeTerminal:
    """In-memory stand-in for Terminal, for tests and scripted input.

    'keys' is a sequence of keys (str or bytes) handed out one per
    read_key() call. Writes are recorded in 'writes'; output() joins them.
    """

    def __init__(self, keys=()):
        self._keys = [k if isinstance(k, bytes) else k.encode("utf-8") for k in keys]
        self.writes = []
        self.mode_calls = []
        self.exited = False
        self._raw = False

    @property
    def in_raw_mode(self):
        return self._raw

    def set_mode(self):
        if self._raw:
            raise RuntimeError("terminal is already in raw mode")
        self._raw = True
        self.mode_calls.append("set")

    def restore_mode(self):
        if not self._raw:
            return
        self._raw = False
        self.mode_calls.append("restore")

    def read_key(self):
        if not self._keys:
            return b""
        return self._keys.pop(0)

    def write(self, text):
        self.writes.append(text)

    def exit(self):
        self.exited = True

    def output(self):
        return "".join(self.writes)
