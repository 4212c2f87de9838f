# Copyright (c) 2026 rawprompt contributors
# SPDX-License-Identifier: ISC
#
# Shared fixtures and helpers for the rawprompt pytest suite.

import os
import re
import sys

import pytest

# Ensure the modules are importable from the project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import prompts  # noqa: E402
from rawprompt import Prompt  # noqa: E402

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Run every test with the default color scheme.

    Removes RAWPROMPT_STYLE and NO_COLOR and makes the next prompt reload
    its styles.
    """
    monkeypatch.delenv("RAWPROMPT_STYLE", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    prompts._style.clear()
    yield
    prompts._style.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_SGR_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_sgr(s):
    """Remove color/attribute sequences, keeping cursor movement."""
    return _SGR_RE.sub("", s)


class QuestionPrompt(Prompt):
    """Minimal content source: renders "Q?\\n> <typed>" plus the error, if
    any, on a third line. Printable keys are appended to the value."""

    def __init__(self, terminal=None, validate=None):
        super().__init__(terminal=terminal, validate=validate)
        self.typed = ""
        self.on("key", self._on_key)

    def _on_key(self, key):
        if key.isprintable():
            self.typed += key

    def render_theme(self):
        frame = "Q?\n> " + self.typed
        if self.error:
            frame += "\n" + self.error
        return frame

    def value(self):
        return self.typed


def required(value):
    return None if value else "Value required"
