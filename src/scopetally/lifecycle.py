"""Opening, recording into, and closing test set scopes."""

from __future__ import annotations

import dataclasses
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from scopetally.aggregate import Counts, aggregate, collect_failures
from scopetally.outcomes import Outcome, OutcomeKind
from scopetally.reporting.console import ConsoleReporter
from scopetally.stack import StackScrubber, capture_stack
from scopetally.tree import Child, ResultTree

_print_enabled = True


def set_print_enabled(enabled: bool) -> None:
    """Turn report and failure printing on or off for the whole process.

    Only output is affected; root failures are still reported through
    :class:`CloseResult`.
    """
    global _print_enabled
    _print_enabled = enabled


def print_enabled() -> bool:
    return _print_enabled


class ScopeStateError(RuntimeError):
    """Raised when recording or closing with no open test set."""


@dataclass
class FailureSummary:
    """Counts and failing outcomes of a root test set that did not pass."""

    passes: int
    fails: int
    errors: int
    broken: int
    failures: list[Outcome] = field(default_factory=list)

    @classmethod
    def from_counts(cls, counts: Counts, failures: list[Outcome]) -> FailureSummary:
        return cls(counts.passes, counts.fails, counts.errors, counts.broken, failures)

    def __str__(self) -> str:
        return (
            f"Some tests did not pass: {self.passes} passed, {self.fails} failed, "
            f"{self.errors} errored, {self.broken} broken."
        )


class ScopeFailure(Exception):
    """The single failure raised for a root test set with failures or errors."""

    def __init__(self, summary: FailureSummary):
        super().__init__(str(summary))
        self.summary = summary


class CloseStatus(str, Enum):
    ATTACHED = "attached"
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class CloseResult:
    """What happened when a scope closed.

    Attributes:
        status: ATTACHED for a nested test set handed to its parent, PASSED
            or FAILED for the root.
        tree: The closed test set.
        failure: Set only when status is FAILED.
    """

    status: CloseStatus
    tree: ResultTree
    failure: FailureSummary | None = None

    @property
    def failed(self) -> bool:
        return self.status is CloseStatus.FAILED

    def raise_for_failure(self) -> ResultTree:
        if self.failure is not None:
            raise ScopeFailure(self.failure)
        return self.tree


class ScopeStack:
    """The open test sets of one run, innermost last.

    Each run owns its own stack; nothing here is shared between runs.
    """

    def __init__(
        self,
        reporter: ConsoleReporter | None = None,
        scrubber: StackScrubber | None = None,
        logger: logging.Logger | None = None,
    ):
        self.reporter = reporter or ConsoleReporter()
        self.scrubber = scrubber or StackScrubber.default()
        self.logger = logger or logging.getLogger("scopetally")
        self._open: list[ResultTree] = []

    @property
    def depth(self) -> int:
        return len(self._open)

    @property
    def current(self) -> ResultTree:
        if not self._open:
            raise ScopeStateError("No test set is open")
        return self._open[-1]

    def open(self, description: str) -> ResultTree:
        node = ResultTree(description)
        self._open.append(node)
        self.logger.debug(f"Opened test set '{description}' at depth {self.depth}")
        return node

    def record(self, item: Child, node: ResultTree | None = None) -> Child:
        """Record an outcome or a finished child test set into *node*.

        *node* defaults to the innermost open test set. Failures and errors
        are printed immediately; they never raise here.
        """
        node = node if node is not None else self.current
        match item:
            case Outcome(kind=OutcomeKind.FAIL):
                raw = item.stack if item.stack is not None else capture_stack()
                item = dataclasses.replace(item, stack=self.scrubber.scrub(raw))
                self._record_failure(node, item)
            case Outcome(kind=OutcomeKind.ERROR):
                self._record_failure(node, item)
            case _:
                node.add(item)
        return item

    def _record_failure(self, node: ResultTree, outcome: Outcome) -> None:
        node.add(outcome)
        self.logger.info(
            f"Recorded {outcome.kind.value} in test set '{node.description}'"
        )
        if print_enabled():
            self.reporter.report_outcome(node.description, outcome)

    def record_exception(self, exc: BaseException, node: ResultTree | None = None) -> Outcome:
        """Record an exception that escaped a test set body as an Error."""
        outcome = Outcome.from_exception(exc, self.scrubber)
        self.record(outcome, node)
        return outcome

    def close(self) -> CloseResult:
        """Close the innermost test set.

        A nested test set is attached to its parent and nothing else happens.
        The root is aggregated, reported when printing is enabled, and
        evaluated: any failure or error anywhere below it makes the result
        FAILED.
        """
        if not self._open:
            raise ScopeStateError("No test set is open")
        node = self._open.pop()
        node.close()

        if self.depth != 0:
            self.record(node, self._open[-1])
            self.logger.debug(f"Attached test set '{node.description}' to parent")
            return CloseResult(CloseStatus.ATTACHED, node)

        counts = aggregate(node)
        if print_enabled():
            self.reporter.render_report(node)

        passes, fails, errors, broken, total = counts.as_tuple()
        if total != passes + broken:
            failures = collect_failures(node)
            self.logger.warning(
                f"Test set '{node.description}' finished with "
                f"{fails} failure(s) and {errors} error(s)"
            )
            return CloseResult(
                CloseStatus.FAILED, node, FailureSummary.from_counts(counts, failures)
            )

        self.logger.debug(f"Test set '{node.description}' passed")
        return CloseResult(CloseStatus.PASSED, node)

    @contextmanager
    def scope(self, description: str) -> Iterator[ResultTree]:
        """Run a block inside a new test set.

        An exception escaping the block is recorded as an Error in this test
        set. Closing the root raises :class:`ScopeFailure` if anything failed.
        Interrupts and exits close the test set and keep propagating.
        """
        node = self.open(description)
        try:
            yield node
        except Exception as exc:
            self.record_exception(exc, node)
        except BaseException:
            self.close()
            raise
        self.close().raise_for_failure()


_current_stack: ContextVar[ScopeStack | None] = ContextVar(
    "scopetally_stack", default=None
)


def current_stack() -> ScopeStack:
    """The stack of the current context, created on first use."""
    stack = _current_stack.get()
    if stack is None:
        stack = ScopeStack()
        _current_stack.set(stack)
    return stack


def use_stack(stack: ScopeStack):
    """Make *stack* the current stack; returns a token for ``reset_stack``."""
    return _current_stack.set(stack)


def reset_stack(token) -> None:
    _current_stack.reset(token)
