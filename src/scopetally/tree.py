"""The result tree: nested test sets holding outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from scopetally.outcomes import Outcome, OutcomeKind


class ScopeClosedError(RuntimeError):
    """Raised when recording into a test set whose scope has closed."""


@dataclass(eq=False)
class ResultTree:
    """A named test set.

    Passing outcomes are folded into ``pass_count`` and never stored, so a
    run with millions of passing checks does not keep one object per check.
    Every other outcome, and every finished child test set, is appended to
    ``children`` in recording order.
    """

    description: str
    children: list[Child] = field(default_factory=list)
    pass_count: int = 0
    has_non_pass: bool = False
    closed: bool = False

    def add(self, child: Child) -> None:
        if self.closed:
            raise ScopeClosedError(f"Test set '{self.description}' is already closed")
        match child:
            case Outcome(kind=OutcomeKind.PASS):
                self.pass_count += 1
            case Outcome() | ResultTree():
                self.children.append(child)

    def close(self) -> None:
        self.closed = True

    def subtrees(self) -> Iterator[ResultTree]:
        for child in self.children:
            match child:
                case ResultTree():
                    yield child

    def outcomes(self) -> Iterator[Outcome]:
        for child in self.children:
            match child:
                case Outcome():
                    yield child

    def iter_outcomes(self) -> Iterator[tuple[ResultTree, Outcome]]:
        """Yield (owner, outcome) for every stored outcome, depth-first."""
        for child in self.children:
            match child:
                case ResultTree():
                    yield from child.iter_outcomes()
                case Outcome():
                    yield self, child


Child = Union[ResultTree, Outcome]
