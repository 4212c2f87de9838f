# Copyright (c) 2026 rawprompt contributors
# SPDX-License-Identifier: ISC
#
# Interaction state machine: transitions, validation and events.

import pytest

from rawprompt import Interaction, PromptState
from rawterm import Key


def _always_fails(value):
    return "Nope"


def _active(validate=None):
    m = Interaction(validate)
    m.start()
    return m


def test_starts_initial():
    m = Interaction()
    assert m.state is PromptState.INITIAL
    assert m.error == ""
    assert not m.validated
    m.start()
    assert m.state is PromptState.ACTIVE


def test_terminal_states():
    assert PromptState.SUBMIT.is_terminal
    assert PromptState.CANCEL.is_terminal
    assert not PromptState.ACTIVE.is_terminal
    assert not PromptState.ERROR.is_terminal
    assert not PromptState.INITIAL.is_terminal


def test_enter_without_validator_submits():
    m = _active()
    assert m.handle_key(Key.ENTER, lambda: "") is True
    assert m.state is PromptState.SUBMIT


def test_other_keys_do_not_validate():
    calls = []

    def validate(value):
        calls.append(value)
        return "bad"

    m = _active(validate)
    assert m.handle_key("a", lambda: "a") is False
    assert m.state is PromptState.ACTIVE
    assert calls == []


def test_value_only_computed_when_validating():
    def value():
        raise AssertionError("value() should not be called")

    m = _active(_always_fails)
    m.handle_key("x", value)
    m.handle_key(Key.CTRL_C, value)


def test_failed_validation_then_next_key_clears_error():
    m = _active(_always_fails)

    assert m.handle_key(Key.ENTER, lambda: "") is False
    assert m.state is PromptState.ERROR
    assert m.error == "Nope"
    assert m.validated

    # The error is cleared before the key is evaluated. Seen from a listener,
    # the machine is back to ACTIVE with no error.
    seen = []
    m.on("key", lambda key: seen.append((m.state, m.error)))
    m.handle_key("a", lambda: "a")
    assert seen == [(PromptState.ACTIVE, "")]

    # ...and since 'validated' is set, the key re-validated
    assert m.state is PromptState.ERROR
    assert m.error == "Nope"


def test_revalidates_on_every_key_after_first_attempt():
    m = _active(lambda value: None if len(value) >= 3 else "Too short")

    m.handle_key(Key.ENTER, lambda: "ab")
    assert m.state is PromptState.ERROR

    # Becomes valid mid-typing: error clears without Enter
    assert m.handle_key("c", lambda: "abc") is False
    assert m.state is PromptState.ACTIVE
    assert m.error == ""
    assert m.validated

    # Invalid again, still without Enter
    m.handle_key(Key.BACKSPACE, lambda: "ab")
    assert m.state is PromptState.ERROR
    assert m.error == "Too short"

    m.handle_key("d", lambda: "abd")
    assert m.handle_key(Key.ENTER, lambda: "abd") is True
    assert m.state is PromptState.SUBMIT
    assert m.error == ""


@pytest.mark.parametrize("validated", [False, True])
def test_ctrl_c_cancels(validated):
    m = _active(_always_fails)
    if validated:
        m.handle_key(Key.ENTER, lambda: "")
        assert m.state is PromptState.ERROR

    assert m.handle_key(Key.CTRL_C, lambda: "") is True
    assert m.state is PromptState.CANCEL
    assert m.error == ""


def test_empty_string_means_valid():
    m = _active(lambda value: "")
    assert m.handle_key(Key.ENTER, lambda: "x") is True
    assert m.state is PromptState.SUBMIT


def test_validator_receives_value():
    received = []
    m = _active(lambda value: received.append(value))
    m.handle_key(Key.ENTER, lambda: ["some", "value"])
    assert received == [["some", "value"]]


def test_non_callable_validator_rejected():
    with pytest.raises(TypeError):
        Interaction("not a function")


@pytest.mark.parametrize("bad", [0, 1, False, True, ["msg"], object()])
def test_bad_validator_return_is_fatal(bad):
    m = _active(lambda value: bad)
    with pytest.raises(TypeError, match="string or None"):
        m.handle_key(Key.ENTER, lambda: "")
    # Not turned into a user-facing error
    assert m.error == ""


def test_validator_exception_propagates():
    def validate(value):
        raise ValueError("boom")

    m = _active(validate)
    with pytest.raises(ValueError, match="boom"):
        m.handle_key(Key.ENTER, lambda: "")


def test_listeners_called_in_order():
    m = _active()
    calls = []
    m.on("key", lambda key: calls.append(("first", key)))
    m.on("key", lambda key: calls.append(("second", key)))
    m.handle_key("z", lambda: "")
    assert calls == [("first", "z"), ("second", "z")]


def test_emit_unknown_event():
    m = Interaction()
    m.emit("nothing-listens")


def test_listener_requested_submit_is_validated():
    m = _active(_always_fails)
    m.on("key", lambda key: m.request_submit() if key == "y" else None)

    assert m.handle_key("y", lambda: True) is False
    assert m.state is PromptState.ERROR

    m2 = _active()
    m2.on("key", lambda key: m2.request_submit())
    assert m2.handle_key("y", lambda: True) is True
    assert m2.state is PromptState.SUBMIT


def test_submit_request_does_not_stick():
    m = _active()
    m.on("key", lambda key: m.request_submit() if key == "y" else None)
    m.handle_key("a", lambda: "")
    assert m.state is PromptState.ACTIVE


def test_listener_cancel_stops():
    m = _active()
    m.on("key", lambda key: m.cancel() if key == Key.ESCAPE else None)
    assert m.handle_key(Key.ESCAPE, lambda: "") is True
    assert m.state is PromptState.CANCEL
