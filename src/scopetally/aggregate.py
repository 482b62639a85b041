from __future__ import annotations

from dataclasses import dataclass, asdict

from rich.text import Text

from scopetally.outcomes import Outcome, OutcomeKind
from scopetally.tree import ResultTree


@dataclass(frozen=True)
class Counts:
    """Result counts for a test set and everything below it."""

    passes: int = 0
    fails: int = 0
    errors: int = 0
    broken: int = 0

    @property
    def total(self) -> int:
        return self.passes + self.fails + self.errors + self.broken

    @property
    def has_failed(self) -> bool:
        # Broken results alone never fail a test set
        return self.fails + self.errors > 0

    def __add__(self, other: Counts) -> Counts:
        return Counts(
            self.passes + other.passes,
            self.fails + other.fails,
            self.errors + other.errors,
            self.broken + other.broken,
        )

    def as_tuple(self) -> tuple[int, int, int, int, int]:
        return (self.passes, self.fails, self.errors, self.broken, self.total)

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


_SINGLE = {
    OutcomeKind.PASS: Counts(passes=1),
    OutcomeKind.FAIL: Counts(fails=1),
    OutcomeKind.ERROR: Counts(errors=1),
    OutcomeKind.BROKEN: Counts(broken=1),
}


def aggregate(node: ResultTree) -> Counts:
    """Sum the results of *node* and all of its descendants.

    Also memoizes ``node.has_non_pass`` for the renderer.
    """
    counts = Counts(passes=node.pass_count)
    for child in node.children:
        match child:
            case ResultTree():
                counts += aggregate(child)
            case Outcome(kind=kind):
                counts += _SINGLE[kind]
    node.has_non_pass = counts.has_failed
    return counts


def unstyle(text: str) -> str:
    """Return *text* with ANSI styling removed."""
    return Text.from_ansi(text).plain


def visible_len(text: str) -> int:
    """Length of *text* as printed, ignoring ANSI styling."""
    return len(unstyle(text))


def column_alignment(node: ResultTree, depth: int = 0) -> int:
    """Width of the description column needed to fit *node* and its subtree.

    Each level is indented two spaces, so the width at a node is its
    indentation plus its description, widened by any deeper row.
    """
    width = 2 * depth + visible_len(node.description)
    for child in node.subtrees():
        width = max(width, column_alignment(child, depth + 1))
    return width


def _header_width(label: str, total: int) -> int:
    return max(len(label), len(str(total))) if total > 0 else 0


@dataclass(frozen=True)
class HeaderWidths:
    """Column widths shared by every row of a report.

    A width of 0 means the column is suppressed.
    """

    passes: int
    fails: int
    errors: int
    broken: int
    total: int

    @classmethod
    def from_counts(cls, counts: Counts) -> HeaderWidths:
        return cls(
            passes=_header_width("Pass", counts.passes),
            fails=_header_width("Fail", counts.fails),
            errors=_header_width("Error", counts.errors),
            broken=_header_width("Broken", counts.broken),
            total=_header_width("Total", counts.total),
        )


def collect_failures(node: ResultTree) -> list[Outcome]:
    """All Fail and Error outcomes below *node*, in depth-first order."""
    return [outcome for _, outcome in node.iter_outcomes() if outcome.is_failure]
