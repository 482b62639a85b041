"""Nested test sets with aggregated, aligned result summaries."""

from scopetally.aggregate import Counts, HeaderWidths, aggregate, column_alignment
from scopetally.lifecycle import (
    CloseResult,
    CloseStatus,
    FailureSummary,
    ScopeFailure,
    ScopeStack,
    ScopeStateError,
    current_stack,
    print_enabled,
    set_print_enabled,
)
from scopetally.outcomes import Frame, Outcome, OutcomeKind
from scopetally.reporting.console import ConsoleReporter
from scopetally.stack import StackScrubber
from scopetally.tree import ResultTree, ScopeClosedError

__all__ = [
    "CloseResult",
    "CloseStatus",
    "ConsoleReporter",
    "Counts",
    "FailureSummary",
    "Frame",
    "HeaderWidths",
    "Outcome",
    "OutcomeKind",
    "ResultTree",
    "ScopeClosedError",
    "ScopeFailure",
    "ScopeStack",
    "ScopeStateError",
    "StackScrubber",
    "aggregate",
    "column_alignment",
    "current_stack",
    "print_enabled",
    "set_print_enabled",
]
