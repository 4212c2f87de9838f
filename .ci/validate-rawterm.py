#!/usr/bin/env python3
"""Validate rawterm and the prompt engine on all platforms.

Exercises key decoding, cursor sequences, styles and a scripted prompt run
(no terminal required), then the real raw-mode enter/restore cycle when a
TTY or native Windows console is available.

Run from the project root: python .ci/validate-rawterm.py
"""

import os
import sys

# Ensure the project root (CWD) is on the import path, since Python
# adds the script's directory (.ci/) rather than CWD by default.
sys.path.insert(0, os.getcwd())

_IS_WINDOWS = os.name == "nt"


def check_rawterm_units():
    """rawterm Key, decode, Cursor, Style -- no terminal required."""
    from rawterm import NAMED_COLORS, Cursor, Key, Style, decode

    assert decode(b"\r") == Key.ENTER, "CR is Enter"
    assert decode(b"\x03") == Key.CTRL_C, "ETX is Ctrl-C"
    assert decode(b"\x1bOA") == Key.UP, "application-mode up"
    assert decode(b"q") == "q", "literal passthrough"

    cursor = Cursor()
    assert cursor.move(-999, -2) == "\x1b[999D\x1b[2A", "relative move"
    assert cursor.erase_down() == "\x1b[J", "erase down"

    for name in ("black", "red", "green", "yellow", "blue", "magenta", "cyan"):
        assert name in NAMED_COLORS, "missing " + name
        assert "bright" + name in NAMED_COLORS, "missing bright" + name

    assert Style(bold=True).apply("x") == "\x1b[1mx\x1b[0m", "style apply"

    print("rawterm unit checks passed")


def check_scripted_prompt():
    """Full prompt loop on FakeTerminal."""
    from prompts import TextPrompt
    from rawterm import FakeTerminal, Key

    term = FakeTerminal(["ok", Key.ENTER])
    assert TextPrompt("Ready?", terminal=term).prompt() == "ok", "text value"
    assert term.mode_calls == ["set", "restore"], "mode restored"

    print("Scripted prompt passed")


def check_terminal_mode():
    """Terminal raw mode set/restore on a real TTY or console."""
    if _IS_WINDOWS:
        can_init = sys.stdin.isatty()
    else:
        can_init = os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())

    if not can_init:
        print("Terminal mode checks skipped (no TTY)")
        return

    from rawterm import Terminal

    term = Terminal()
    term.set_mode()
    try:
        assert term.in_raw_mode, "raw mode entered"
        try:
            term.set_mode()
        except RuntimeError:
            pass
        else:
            raise AssertionError("set_mode() should not be re-entrant")
    finally:
        term.restore_mode()
    assert not term.in_raw_mode, "raw mode left"
    # Restoring twice is harmless
    term.restore_mode()

    print("Terminal mode checks passed")


if __name__ == "__main__":
    check_rawterm_units()
    check_scripted_prompt()
    check_terminal_mode()
    print("All checks passed")
