import dataclasses

import pytest

from scopetally.outcomes import Frame, Outcome, OutcomeKind
from scopetally.stack import StackScrubber


def _explode():
    raise ValueError("boom")


def test_constructors_set_kind():
    assert Outcome.passed().kind is OutcomeKind.PASS
    assert Outcome.failed().kind is OutcomeKind.FAIL
    assert Outcome.errored().kind is OutcomeKind.ERROR
    assert Outcome.broken().kind is OutcomeKind.BROKEN


def test_only_fail_and_error_are_failures():
    assert Outcome.failed().is_failure
    assert Outcome.errored().is_failure
    assert not Outcome.broken().is_failure
    assert not Outcome.passed().is_failure


def test_outcome_is_immutable():
    outcome = Outcome.failed("x == 1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        outcome.message = "changed"


def test_render_failure_shows_expression_and_message():
    outcome = Outcome.failed("x == 1", "Evaluated: 2 == 1")

    assert outcome.render() == (
        "Test Failed\n  Expression: x == 1\n  Evaluated: 2 == 1"
    )


def test_render_failure_leaves_stack_to_the_reporter():
    outcome = Outcome.failed("x", stack=(Frame("body", "/t/test_x.py", 3),))

    assert "test_x.py" not in outcome.render()


def test_render_error_includes_its_own_stack_outermost_first():
    stack = (Frame("inner", "/t/a.py", 10), Frame("outer", "/t/b.py", 20))
    outcome = Outcome.errored(message="KeyError: 'k'", stack=stack)

    lines = outcome.render().splitlines()

    assert lines[0] == "Error During Test"
    assert lines[1] == "  KeyError: 'k'"
    assert lines[2] == "  Stack (most recent call last):"
    assert lines[3] == '    File "/t/b.py", line 20, in outer'
    assert lines[4] == '    File "/t/a.py", line 10, in inner'


def test_render_broken_headline():
    assert Outcome.broken("known bug").render() == (
        "Test Broken\n  Expression: known bug"
    )


def test_from_exception_records_message_and_innermost_frame_first():
    try:
        _explode()
    except ValueError as exc:
        outcome = Outcome.from_exception(exc)

    assert outcome.kind is OutcomeKind.ERROR
    assert outcome.message == "ValueError: boom"
    assert outcome.stack[0].function == "_explode"
    assert outcome.stack[1].function == (
        "test_from_exception_records_message_and_innermost_frame_first"
    )


def test_from_exception_scrubs_with_given_scrubber():
    scrubber = StackScrubber(lambda frame: frame.function == "_explode")
    try:
        _explode()
    except ValueError as exc:
        outcome = Outcome.from_exception(exc, scrubber, description="setup")

    assert outcome.description == "setup"
    assert [frame.function for frame in outcome.stack] == [
        "test_from_exception_scrubs_with_given_scrubber"
    ]
