"""``describe`` / ``it`` / ``test`` blocks.

Each block is a test set on the current :class:`ScopeStack`. They work as
context managers::

    with describe("parser"):
        with it("reads numbers"):
            record(Outcome.passed())

and as decorators, in which case the test set is opened each time the
decorated function is called.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from scopetally.lifecycle import ScopeStack, current_stack
from scopetally.outcomes import Outcome
from scopetally.tree import ResultTree


@contextmanager
def _block(text: str, stack: ScopeStack | None) -> Iterator[ResultTree]:
    stack = stack or current_stack()
    with stack.scope(text) as node:
        yield node


def describe(text: str, stack: ScopeStack | None = None):
    label = typer.style(text, fg=typer.colors.YELLOW, bold=True)
    return _block(label, stack)


def it(text: str, stack: ScopeStack | None = None):
    tag = typer.style("[Spec] ", fg=typer.colors.CYAN, bold=True)
    return _block(f"{tag}it {text}", stack)


def test(text: str, stack: ScopeStack | None = None):
    tag = typer.style("[Test] ", fg=typer.colors.BLUE, bold=True)
    return _block(f"{tag}{text}", stack)


def record(outcome: Outcome, stack: ScopeStack | None = None) -> Outcome:
    """Record *outcome* into the innermost open test set."""
    return (stack or current_stack()).record(outcome)


test.__test__ = False
