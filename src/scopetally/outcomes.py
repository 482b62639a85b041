"""Outcome records produced by the assertion layer."""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scopetally.stack import StackScrubber


class OutcomeKind(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"
    BROKEN = "broken"


_HEADLINES = {
    OutcomeKind.PASS: "Test Passed",
    OutcomeKind.FAIL: "Test Failed",
    OutcomeKind.ERROR: "Error During Test",
    OutcomeKind.BROKEN: "Test Broken",
}


@dataclass(frozen=True)
class Frame:
    """One call stack entry."""

    function: str
    file: str
    line: int

    def render(self) -> str:
        return f'  File "{self.file}", line {self.line}, in {self.function}'


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating a single check.

    Attributes:
        kind: Which of pass/fail/error/broken this outcome is.
        description: The captured expression or a short description of the
            check (e.g. "x == 1").
        message: Human-readable detail about the result.
        stack: Call stack of the check, innermost frame first. Only set for
            failures and errors.
    """

    kind: OutcomeKind
    description: str = ""
    message: str = ""
    stack: tuple[Frame, ...] | None = None

    @classmethod
    def passed(cls, description: str = "") -> Outcome:
        return cls(OutcomeKind.PASS, description)

    @classmethod
    def failed(
        cls,
        description: str = "",
        message: str = "",
        stack: tuple[Frame, ...] | None = None,
    ) -> Outcome:
        return cls(OutcomeKind.FAIL, description, message, stack)

    @classmethod
    def errored(
        cls,
        description: str = "",
        message: str = "",
        stack: tuple[Frame, ...] | None = None,
    ) -> Outcome:
        return cls(OutcomeKind.ERROR, description, message, stack)

    @classmethod
    def broken(cls, description: str = "", message: str = "") -> Outcome:
        return cls(OutcomeKind.BROKEN, description, message)

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        scrubber: StackScrubber | None = None,
        description: str = "",
    ) -> Outcome:
        """Build an Error outcome for an exception raised inside a scope body.

        The stack is taken from the exception's own traceback and scrubbed of
        machinery frames when a scrubber is given.
        """
        from scopetally.stack import frames_from_traceback

        frames = frames_from_traceback(exc.__traceback__)
        if scrubber is not None:
            frames = scrubber.scrub(frames)
        message = "".join(traceback.format_exception_only(type(exc), exc)).rstrip()
        return cls(OutcomeKind.ERROR, description, message, frames)

    @property
    def is_failure(self) -> bool:
        """True for outcomes that make a run fail (Fail and Error)."""
        return self.kind in (OutcomeKind.FAIL, OutcomeKind.ERROR)

    def render(self) -> str:
        lines = [_HEADLINES[self.kind]]
        if self.description:
            lines.append(f"  Expression: {self.description}")
        if self.message:
            lines.extend(f"  {line}" for line in self.message.splitlines())
        # Errors carry their own trace; failures get theirs printed by the reporter
        if self.kind is OutcomeKind.ERROR and self.stack:
            lines.append("  Stack (most recent call last):")
            lines.extend(f"  {frame.render()}" for frame in reversed(self.stack))
        return "\n".join(lines)
