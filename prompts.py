# Copyright (c) 2026 rawprompt contributors
# SPDX-License-Identifier: ISC

"""
Overview
========

Ready-made prompts built on rawprompt.Prompt:

  text()      Single-line text input with cursor editing
  password()  Like text(), with the input masked
  confirm()   Yes/No question
  select()    Pick one option from a list

Each function builds the prompt, runs it, and returns the answer:

    name = text("What is your name?", required=True)
    if confirm(f"Greet {name}?"):
        color = select("Favorite color?", ["red", "green", "blue"])

Keys
====

  text/password  Left/Right, Home/End (Ctrl-A/Ctrl-E), Backspace, Delete,
                 Ctrl-U (delete to start of line)
  confirm        Left/Right/Up/Down/Tab switch, y/n answer directly
  select         Up/Down (or k/j) move, Home/End jump, wraps around

Enter submits, Ctrl-C cancels and exits with status 1.


Color schemes
=============

The RAWPROMPT_STYLE environment variable customizes colors, the same way
MENUCONFIG_STYLE does for menuconfig. It holds space-separated
<element>=<attributes> assignments, where the attributes are a comma
separated list of:

    - fg:COLOR      One of the 16 basic colors (black, red, green, yellow,
                    blue, magenta, cyan, white and bright versions, for
                    example, brightred), or a 0-255 palette number
    - bold, dim, italic, underline, standout, strikethrough

The right-hand side may also name another element, to copy its style
("hint=placeholder"), and a bare word names a built-in style template that
is expanded in-place. Built-in templates:

    - default       colors
    - monochrome    attributes only (also used when NO_COLOR is set)

Elements:

    - label         Question text
    - value         Text typed by the user
    - placeholder   Placeholder shown while the input is empty
    - hint          Hint line below the input
    - highlight     Prompt markers and the selected option
    - error         Validation error line and the input while in error
    - answer        Submitted answer
    - cancel        Input of a cancelled prompt
    - cursor        Character under the (drawn) text cursor

Example:

    RAWPROMPT_STYLE="default label=fg:magenta,bold error=fg:red"
"""

import os
import sys

from rawprompt import Prompt, PromptState
from rawterm import NAMED_COLORS, Color, Key, Style

#
# Styling
#

_STYLES = {
    "default": """
    label=bold
    value=
    placeholder=dim
    hint=dim
    highlight=fg:cyan,bold
    error=fg:yellow
    answer=dim
    cancel=fg:red,strikethrough
    cursor=standout
    """,
    "monochrome": """
    label=bold
    value=
    placeholder=dim
    hint=dim
    highlight=bold
    error=bold,underline
    answer=dim
    cancel=strikethrough
    cursor=standout
    """,
}

_STYLE_ATTRIBUTES = ("bold", "dim", "italic", "underline", "standout", "strikethrough")

# Dictionary mapping element names to rawterm.Style objects
_style = {}


def _parse_color(color_def):
    """Parse a color definition string, returning a rawterm.Color."""
    if color_def in NAMED_COLORS:
        return NAMED_COLORS[color_def]

    try:
        num = int(color_def, 0)
    except ValueError:
        _warn("Ignoring color", color_def, "that's neither predefined nor a number")
        return Color.DEFAULT

    if 0 <= num <= 255:
        return Color.index(num)
    _warn(f"Ignoring color {color_def} outside range 0..255")
    return Color.DEFAULT


def _style_from_def(style_def):
    """Parse a style definition string, returning a rawterm.Style."""
    fg = Color.DEFAULT
    attrs = {}

    for field in style_def.split(","):
        if not field:
            continue
        if field.startswith("fg:"):
            fg = _parse_color(field.split(":", 1)[1])
        elif field in _STYLE_ATTRIBUTES:
            attrs[field] = True
        else:
            _warn("Ignoring unknown style attribute", field)

    return Style(fg=fg, **attrs)


def _parse_style(style_str, parsing_default):
    # Parses a string with '<element>=<style>' assignments. Anything not
    # containing '=' is a reference to a built-in style template.
    #
    # parsing_default is True for the implicitly applied base template, which
    # is allowed to introduce new elements without warnings.

    for sline in style_str.split():
        if "=" in sline:
            key, data = sline.split("=", 1)

            if key not in _style and not parsing_default:
                _warn("Ignoring non-existent style", key)
                continue

            # If data is a reference to another element, copy its style
            if data in _style:
                _style[key] = _style[data]
            else:
                _style[key] = _style_from_def(data)

        elif sline in _STYLES:
            _parse_style(_STYLES[sline], parsing_default)

        else:
            _warn("Ignoring non-existent style template", sline)


def _init_styles():
    # Base template first, then any user-defined settings from the
    # environment
    _style.clear()
    _parse_style("monochrome" if "NO_COLOR" in os.environ else "default", True)
    if "RAWPROMPT_STYLE" in os.environ:
        _parse_style(os.environ["RAWPROMPT_STYLE"], False)


def _styled(element, text):
    return _style[element].apply(text)


def _warn(*args):
    # Called before raw mode is entered, so the message lands on a sane
    # terminal
    print("rawprompt warning: ", end="", file=sys.stderr)
    print(*args, file=sys.stderr)


#
# Prompts
#


class _BasePrompt(Prompt):
    """Shared label/hint handling and the themed frame layout.

    Frames look like

        ? <label>
        › <field>
          <hint or error>

    and collapse to a single "✔ <label> <answer>" line once submitted.
    Every frame ends with a newline, so the terminal cursor is left on the
    line below the prompt when it finishes.
    """

    def __init__(self, label, hint="", required=False, validate=None, terminal=None):
        if not _style:
            _init_styles()

        if required is True:
            required = "Required."

        self.label = label
        self.hint = hint
        self.required = required or ""
        self._user_validate = validate

        if validate is not None and not callable(validate):
            raise TypeError(
                f"validator must be callable or None, not {type(validate).__name__}"
            )

        super().__init__(terminal=terminal, validate=self._check)

    def _check(self, value):
        if self.required and _is_empty(value):
            return self.required
        if self._user_validate is not None:
            return self._user_validate(value)
        return None

    def field(self):
        """Return the input line, styled for the active state."""
        raise NotImplementedError

    def answer(self):
        """Return the submitted value as shown after the prompt finishes."""
        return str(self.value())

    def extra_lines(self):
        """Lines drawn between the field and the hint (select options)."""
        return []

    def render_theme(self):
        state = self.state

        if state is PromptState.SUBMIT:
            return "{} {} {}\n".format(
                _styled("highlight", "✔"),
                _styled("label", self.label),
                _styled("answer", self.answer()),
            )

        if state is PromptState.CANCEL:
            return "{} {} {}\n{}\n".format(
                _styled("error", "✖"),
                _styled("label", self.label),
                _styled("cancel", self.answer()),
                _styled("error", "  Cancelled."),
            )

        marker = "▲" if state is PromptState.ERROR else "?"
        marker_style = "error" if state is PromptState.ERROR else "highlight"
        lines = [
            "{} {}".format(_styled(marker_style, marker), _styled("label", self.label)),
            "{} {}".format(_styled(marker_style, "›"), self.field()),
        ]
        lines.extend(self.extra_lines())

        if state is PromptState.ERROR:
            lines.append(_styled("error", "  ⚠ " + self.error))
        elif self.hint:
            lines.append(_styled("hint", "  " + self.hint))

        return "\n".join(lines) + "\n"


def _is_empty(value):
    if value is None or value is False:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return not value
    return False


class TextPrompt(_BasePrompt):
    """Single-line text input.

    label:
      Question shown above the input.

    placeholder:
      Text shown (dimmed) while the input is empty.

    default:
      Initial value. The cursor starts after it.

    required:
      True, or an error message, to refuse an empty answer.

    validate:
      Function taking the value and returning an error message or None.

    hint:
      Help text shown below the input.
    """

    def __init__(
        self,
        label,
        placeholder="",
        default="",
        required=False,
        validate=None,
        hint="",
        terminal=None,
    ):
        super().__init__(label, hint, required, validate, terminal)
        self.placeholder = placeholder
        self.typed = default
        self.cursor_pos = len(default)
        self.on("key", self._on_key)

    def _on_key(self, key):
        typed = self.typed
        pos = self.cursor_pos

        if key == Key.LEFT:
            self.cursor_pos = max(0, pos - 1)
        elif key == Key.RIGHT:
            self.cursor_pos = min(len(typed), pos + 1)
        elif key in (Key.HOME, Key.CTRL_A):
            self.cursor_pos = 0
        elif key in (Key.END, Key.CTRL_E):
            self.cursor_pos = len(typed)
        elif key == Key.BACKSPACE:
            if pos > 0:
                self.typed = typed[: pos - 1] + typed[pos:]
                self.cursor_pos = pos - 1
        elif key in (Key.DELETE, Key.CTRL_D):
            self.typed = typed[:pos] + typed[pos + 1 :]
        elif key == Key.CTRL_U:
            self.typed = typed[pos:]
            self.cursor_pos = 0
        elif key.isprintable():
            self.typed = typed[:pos] + key + typed[pos:]
            self.cursor_pos = pos + len(key)

    def shown(self):
        """Return the value as displayed."""
        return self.typed

    def field(self):
        shown = self.shown()
        element = "error" if self.state is PromptState.ERROR else "value"

        if not shown:
            if self.placeholder:
                return _styled("cursor", self.placeholder[0]) + _styled(
                    "placeholder", self.placeholder[1:]
                )
            return _styled("cursor", " ")

        pos = self.cursor_pos
        return (
            _styled(element, shown[:pos])
            + _styled("cursor", shown[pos : pos + 1] or " ")
            + _styled(element, shown[pos + 1 :])
        )

    def answer(self):
        return self.shown()

    def value(self):
        return self.typed


class PasswordPrompt(TextPrompt):
    """Text input with the typed characters masked."""

    def __init__(
        self,
        label,
        placeholder="",
        required=False,
        validate=None,
        hint="",
        mask="•",
        terminal=None,
    ):
        super().__init__(
            label,
            placeholder=placeholder,
            required=required,
            validate=validate,
            hint=hint,
            terminal=terminal,
        )
        self.mask = mask

    def shown(self):
        return self.mask * len(self.typed)


class ConfirmPrompt(_BasePrompt):
    """Yes/No question. The value is a bool."""

    def __init__(
        self,
        label,
        default=True,
        yes="Yes",
        no="No",
        required=False,
        validate=None,
        hint="",
        terminal=None,
    ):
        super().__init__(label, hint, required, validate, terminal)
        self.confirmed = bool(default)
        self.yes = yes
        self.no = no
        self.on("key", self._on_key)

    _TOGGLE_KEYS = (
        Key.LEFT,
        Key.RIGHT,
        Key.UP,
        Key.DOWN,
        Key.TAB,
        Key.SHIFT_TAB,
        "h",
        "j",
        "k",
        "l",
    )

    def _on_key(self, key):
        if key in self._TOGGLE_KEYS:
            self.confirmed = not self.confirmed
        elif key in ("y", "Y"):
            self.confirmed = True
            self.submit()
        elif key in ("n", "N"):
            self.confirmed = False
            self.submit()

    def field(self):
        def option(label, selected):
            if selected:
                return _styled("highlight", "● " + label)
            return _styled("placeholder", "○ " + label)

        return "{} / {}".format(
            option(self.yes, self.confirmed), option(self.no, not self.confirmed)
        )

    def answer(self):
        return self.yes if self.confirmed else self.no

    def value(self):
        return self.confirmed


class SelectPrompt(_BasePrompt):
    """Single choice from a list of options.

    options:
      List of values, or a dict mapping values to the labels shown.

    default:
      Value highlighted initially. Defaults to the first option.

    scroll:
      Number of options visible at once. Longer lists scroll.
    """

    def __init__(
        self,
        label,
        options,
        default=None,
        scroll=5,
        required=False,
        validate=None,
        hint="",
        terminal=None,
    ):
        if not options:
            raise ValueError("select prompt needs at least one option")
        if scroll < 1:
            raise ValueError("scroll must be at least 1")

        super().__init__(label, hint, required, validate, terminal)

        if isinstance(options, dict):
            self.values = list(options)
            self.labels = [str(options[v]) for v in self.values]
        else:
            self.values = list(options)
            self.labels = [str(v) for v in self.values]

        self.scroll = scroll
        self.highlighted = 0
        if default is not None:
            if default not in self.values:
                raise ValueError(f"default {default!r} is not one of the options")
            self.highlighted = self.values.index(default)
        self.first_visible = 0
        self._scroll_to_highlighted()
        self.on("key", self._on_key)

    def _on_key(self, key):
        n = len(self.values)

        if key in (Key.UP, Key.LEFT, Key.SHIFT_TAB, "k"):
            self.highlighted = (self.highlighted - 1) % n
        elif key in (Key.DOWN, Key.RIGHT, Key.TAB, "j"):
            self.highlighted = (self.highlighted + 1) % n
        elif key in (Key.HOME, Key.PAGE_UP):
            self.highlighted = 0
        elif key in (Key.END, Key.PAGE_DOWN):
            self.highlighted = n - 1
        else:
            return

        self._scroll_to_highlighted()

    def _scroll_to_highlighted(self):
        # Keep the highlighted option inside the visible window
        if self.highlighted < self.first_visible:
            self.first_visible = self.highlighted
        elif self.highlighted >= self.first_visible + self.scroll:
            self.first_visible = self.highlighted - self.scroll + 1

    def field(self):
        return _styled("value", self.labels[self.highlighted])

    def extra_lines(self):
        lines = []
        last = min(len(self.values), self.first_visible + self.scroll)
        for i in range(self.first_visible, last):
            if i == self.highlighted:
                lines.append(_styled("highlight", "  › " + self.labels[i]))
            else:
                lines.append("    " + self.labels[i])

        if len(self.values) > self.scroll:
            lines.append(
                _styled(
                    "hint", f"    ({self.highlighted + 1}/{len(self.values)})"
                )
            )
        return lines

    def answer(self):
        return self.labels[self.highlighted]

    def value(self):
        return self.values[self.highlighted]


#
# Shortcuts
#


def text(label, **kwargs):
    """Ask for a line of text. See TextPrompt for the keyword arguments."""
    return TextPrompt(label, **kwargs).prompt()


def password(label, **kwargs):
    """Ask for a secret. See PasswordPrompt for the keyword arguments."""
    return PasswordPrompt(label, **kwargs).prompt()


def confirm(label, **kwargs):
    """Ask a yes/no question. See ConfirmPrompt for the keyword arguments."""
    return ConfirmPrompt(label, **kwargs).prompt()


def select(label, options, **kwargs):
    """Ask for one of 'options'. See SelectPrompt for the keyword
    arguments."""
    return SelectPrompt(label, options, **kwargs).prompt()
