# Copyright (c) 2026 rawprompt contributors
# SPDX-License-Identifier: ISC
#
# Key decoding: raw terminal input -> Key constants or literal text.

import os
import select
import sys

import pytest

from rawterm import Key, Terminal, decode, is_partial


@pytest.mark.parametrize(
    "raw, key",
    [
        (b"\r", Key.ENTER),
        (b"\n", Key.ENTER),
        (b"\r\n", Key.ENTER),
        (b"\x03", Key.CTRL_C),
        (b"\x7f", Key.BACKSPACE),
        (b"\x08", Key.BACKSPACE),
        (b"\x1b[A", Key.UP),
        (b"\x1bOA", Key.UP),
        (b"\x1b[B", Key.DOWN),
        (b"\x1bOD", Key.LEFT),
        (b"\x1b[1~", Key.HOME),
        (b"\x1b[7~", Key.HOME),
        (b"\x1b[8~", Key.END),
        (b"\x1b[3~", Key.DELETE),
        (b"\x1b[Z", Key.SHIFT_TAB),
    ],
)
def test_known_sequences(raw, key):
    """Terminal variants normalize to one canonical Key value."""
    assert decode(raw) == key


def test_literal_characters_pass_through():
    assert decode(b"a") == "a"
    assert decode(b" ") == " "
    # Multi-byte UTF-8 stays one character
    assert decode("é".encode("utf-8")) == "é"
    # Pasted text stays together
    assert decode(b"hello") == "hello"


def test_str_input_accepted():
    assert decode("\x1b[C") == Key.RIGHT
    assert decode("x") == "x"


def test_unknown_sequence_is_literal():
    """An escape sequence missing from the table is not split up: the whole
    chunk comes back as literal text."""
    assert decode(b"\x1b[99~") == "\x1b[99~"
    # Known prefix plus trailing garbage is not the known key
    assert decode(b"\x1b[Ax") == "\x1b[Ax"


def test_lone_escape():
    assert decode(b"\x1b") == Key.ESCAPE


def test_end_of_input():
    assert decode(b"") == ""


def test_invalid_utf8_replaced():
    assert decode(b"\xff") == "�"


def test_is_partial():
    assert is_partial(b"\x1b")
    assert is_partial(b"\x1b[")
    assert is_partial(b"\x1b[1")
    assert not is_partial(b"\x1b[A")
    assert not is_partial(b"\x1b[Q")
    assert not is_partial(b"a")
    # "\r" is complete even though "\r\n" extends it
    assert not is_partial(b"\r")


# ---------------------------------------------------------------------------
# Terminal.read_key
# ---------------------------------------------------------------------------


class _Stream:
    def __init__(self, fd):
        self._fd = fd

    def fileno(self):
        return self._fd


class _Poller:
    """Delivers the remaining chunks one per poll() call, the way a slow pty
    trickles input in."""

    def __init__(self, write_fd, chunks):
        self._write_fd = write_fd
        self._chunks = list(chunks)

    def feed(self, data):
        os.write(self._write_fd, data)

    def poll(self, timeout):
        if not self._chunks:
            return []
        os.write(self._write_fd, self._chunks.pop(0))
        return [(self._write_fd, select.POLLIN)]


@pytest.fixture
def pipe_terminal(monkeypatch):
    """Returns a function building a Terminal that reads from a pipe. The
    first chunk is readable right away, the rest arrive while read_key()
    waits."""
    r, w = os.pipe()
    monkeypatch.setattr(os, "isatty", lambda fd: True)
    monkeypatch.setattr(sys, "stdin", _Stream(r))
    monkeypatch.setattr(sys, "stdout", _Stream(w))

    def make(first, *rest):
        term = Terminal()
        term._poller = _Poller(w, rest)
        os.write(w, first)
        return term

    yield make

    os.close(r)
    os.close(w)


unix_only = pytest.mark.skipif(os.name == "nt", reason="Unix terminal only")


@unix_only
def test_read_key_joins_split_utf8(pipe_terminal):
    term = pipe_terminal(b"\xc3", b"\xa9")
    assert decode(term.read_key()) == "é"


@unix_only
def test_read_key_joins_split_utf8_after_text(pipe_terminal):
    term = pipe_terminal(b"ab\xe2\x82", b"\xac")
    assert decode(term.read_key()) == "ab€"


@unix_only
def test_read_key_truncated_utf8_replaced_once(pipe_terminal):
    term = pipe_terminal(b"\xc3")
    assert decode(term.read_key()) == "�"
    # The dangling byte doesn't corrupt the next key
    term._poller.feed(b"x")
    assert decode(term.read_key()) == "x"


@unix_only
def test_read_key_joins_split_escape_sequence(pipe_terminal):
    term = pipe_terminal(b"\x1b[", b"A")
    assert decode(term.read_key()) == Key.UP
