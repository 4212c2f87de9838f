# Copyright (c) 2026 rawprompt contributors
# SPDX-License-Identifier: ISC

"""
Prompt engine core: the interaction state machine and the render loop.

A prompt is a content source (render_theme() and value()) driven by
Prompt.prompt(). Each key read from the terminal goes through the
Interaction state machine, after which the frame is recomputed and only the
lines that changed since the previous frame are repainted. Drawing is inline
and uses relative cursor movement only, so whatever is on screen above the
prompt is left alone.

Subclasses implement render_theme() and value(), and usually listen for the
"key" event to update their value:

    class Echo(Prompt):
        def __init__(self):
            super().__init__()
            self.typed = ""
            self.on("key", self._on_key)

        def _on_key(self, key):
            if key.isprintable():
                self.typed += key

        def render_theme(self):
            return "Say something:\\n> " + self.typed

        def value(self):
            return self.typed
"""

import enum
from contextlib import contextmanager

from rawterm import Cursor, Key, Terminal, decode


class PromptState(enum.Enum):
    INITIAL = "initial"
    ACTIVE = "active"
    ERROR = "error"
    SUBMIT = "submit"
    CANCEL = "cancel"

    @property
    def is_terminal(self):
        return self in (PromptState.SUBMIT, PromptState.CANCEL)


# ---------------------------------------------------------------------------
# Frame diffing
# ---------------------------------------------------------------------------


def diff_lines(prev, curr):
    """Return the indices of the lines that differ between two frames.

    Line granularity: one changed character marks its whole line. When the
    frames have different line counts, every index past the end of the
    shorter one is marked.
    """
    if prev == curr:
        return []

    prev_lines = prev.split("\n")
    curr_lines = curr.split("\n")

    diff = []
    for i in range(max(len(prev_lines), len(curr_lines))):
        if (
            i >= len(prev_lines)
            or i >= len(curr_lines)
            or prev_lines[i] != curr_lines[i]
        ):
            diff.append(i)

    return diff


# ---------------------------------------------------------------------------
# Interaction state machine
# ---------------------------------------------------------------------------


class Interaction:
    """Prompt lifecycle: INITIAL -> ACTIVE <-> ERROR -> SUBMIT/CANCEL.

    validate:
      None, or a function taking the prompt value and returning an error
      message, or None/"" when the value is acceptable.

    'error' is non-empty exactly when 'state' is ERROR.
    """

    def __init__(self, validate=None):
        if validate is not None and not callable(validate):
            raise TypeError(
                f"validator must be callable or None, not {type(validate).__name__}"
            )

        self.state = PromptState.INITIAL
        self.error = ""
        # Set by the first validation attempt. From then on every key
        # re-validates, so an error clears as soon as the input is fixed.
        self.validated = False
        self._validate = validate
        self._listeners = {}
        self._submit_requested = False

    def on(self, event, callback):
        """Register 'callback' for 'event'."""
        self._listeners.setdefault(event, []).append(callback)

    def emit(self, event, *args):
        for callback in self._listeners.get(event, ()):
            callback(*args)

    def start(self):
        self.state = PromptState.ACTIVE

    def request_submit(self):
        """Treat the key being handled as Enter. For listeners that answer the
        prompt on other keys ("y" in a confirm prompt)."""
        self._submit_requested = True

    def submit(self):
        self.state = PromptState.SUBMIT
        self.error = ""

    def cancel(self):
        self.state = PromptState.CANCEL
        self.error = ""

    def handle_key(self, key, value):
        """Advance the state machine for one key.

        'value' is a zero-argument function returning the current value. It
        is only called when the validator runs. Returns True when the prompt
        should stop reading keys.
        """
        # The error banner lasts for one key
        if self.state is PromptState.ERROR:
            self.state = PromptState.ACTIVE
            self.error = ""

        self._submit_requested = False
        self.emit("key", key)

        if key == Key.CTRL_C:
            self.cancel()
            return True

        if self.state.is_terminal:
            # A listener cancelled the prompt
            return True

        submitting = key == Key.ENTER or self._submit_requested

        if submitting or self.validated:
            error = self.validate(value())
            self.validated = True

            if error:
                self.state = PromptState.ERROR
                self.error = error
            elif submitting:
                self.submit()
                return True

        return False

    def validate(self, value):
        """Run the validator on 'value' and return the error message, or ""
        if the value is valid."""
        if self._validate is None:
            return ""

        error = self._validate(value)

        if error is not None and not isinstance(error, str):
            raise TypeError(
                "validator must return a string or None, not "
                + type(error).__name__
            )

        return error or ""


# ---------------------------------------------------------------------------
# Render loop
# ---------------------------------------------------------------------------


class Prompt:
    """Base class for prompts. Subclasses provide render_theme() and value().

    terminal:
      Terminal (or FakeTerminal) to run on. If None, a Terminal is created on
      the first call to prompt() and reused by later calls. Only one prompt
      may hold a terminal in raw mode at a time.

    validate:
      Optional validator, see Interaction.
    """

    def __init__(self, terminal=None, validate=None):
        self._terminal = terminal
        self._cursor = Cursor()
        self._interaction = Interaction(validate)
        self._prev_frame = ""

    @property
    def state(self):
        return self._interaction.state

    @property
    def error(self):
        return self._interaction.error

    def on(self, event, callback):
        """Register a listener. The "key" event receives every decoded key
        before validation runs."""
        self._interaction.on(event, callback)

    def render_theme(self):
        """Return the full frame for the current value, state and error."""
        raise NotImplementedError

    def value(self):
        """Return the value the prompt currently holds."""
        raise NotImplementedError

    def submit(self):
        """Answer the prompt with the current value, as if Enter had been
        pressed. Only meaningful from a "key" listener."""
        self._interaction.request_submit()

    def cancel(self):
        self._interaction.cancel()

    def terminal(self):
        if self._terminal is None:
            self._terminal = Terminal()
        return self._terminal

    @contextmanager
    def _raw_session(self, terminal):
        # Raw mode and a hidden cursor for the lifetime of the block. The
        # finally clause covers return, Ctrl-C and exceptions alike.
        terminal.set_mode()
        try:
            terminal.write(self._cursor.hide())
            yield
        finally:
            try:
                terminal.write(self._cursor.show())
            finally:
                terminal.restore_mode()

    def prompt(self):
        """Run the prompt until it is submitted or cancelled, or input ends.

        Returns the value. On Ctrl-C the terminal is restored and then
        terminal.exit() is called.
        """
        terminal = self.terminal()
        cancelled = False

        with self._raw_session(terminal):
            self.render()

            while True:
                key = decode(terminal.read_key())
                if not key:
                    break

                stop = self._interaction.handle_key(key, self.value)

                self.render()

                if stop or key == Key.CTRL_C:
                    cancelled = self.state is PromptState.CANCEL
                    break

        if cancelled:
            terminal.exit()

        return self.value()

    def render(self):
        """Paint the current frame, repainting only what changed."""
        frame = self.render_theme()

        if self._interaction.state is PromptState.INITIAL:
            self.terminal().write(frame)
            self._interaction.start()
            self._prev_frame = frame
            return

        if frame == self._prev_frame:
            return

        cursor = self._cursor
        lines = frame.split("\n")
        prev_count = self._prev_frame.count("\n") + 1
        diff = diff_lines(self._prev_frame, frame)

        # Back to the top left of the previous frame
        buf = [cursor.move(-999, 1 - prev_count)]

        # A frame that grew or shrank by one line also has a single diff
        # entry, but the row it names isn't on screen yet (or anymore), so
        # only same-height frames are patched in place
        if len(diff) == 1 and len(lines) == prev_count:
            # One line changed in place: rewrite it, then go back down to
            # column 1 of the bottom row
            line = diff[0]
            buf.append(cursor.move(0, line))
            buf.append(cursor.erase_lines(1))
            buf.append(lines[line])
            buf.append(cursor.move(-999, len(lines) - line - 1))
        elif diff:
            # Redraw everything from the first change down. Rows below either
            # frame can't be moved to, so start at the lowest row both have.
            line = min(diff[0], prev_count - 1, len(lines) - 1)
            buf.append(cursor.move(0, line))
            buf.append(cursor.erase_down())
            buf.append("\n".join(lines[line:]))

        self.terminal().write("".join(buf))
        self._prev_frame = frame
