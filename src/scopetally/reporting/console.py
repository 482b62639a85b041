"""Aligned, color-annotated terminal summary of a result tree."""

from __future__ import annotations

from typing import TextIO

import typer

from scopetally.aggregate import (
    Counts,
    HeaderWidths,
    aggregate,
    column_alignment,
    visible_len,
)
from scopetally.outcomes import Outcome, OutcomeKind
from scopetally.tree import ResultTree

SUMMARY_LABEL = "Test Summary:"
NO_TESTS = "No tests"

PASS_COLOR = typer.colors.GREEN
ERROR_COLOR = typer.colors.RED
BROKEN_COLOR = typer.colors.YELLOW
INFO_COLOR = typer.colors.BLUE


def _rpad(text: str, width: int) -> str:
    return text + " " * max(width - visible_len(text), 0)


class ConsoleReporter:
    """Writes reports and immediate failure detail to a text stream.

    Output goes through ``typer.echo``, which strips ANSI styling when the
    stream is not a terminal unless ``color`` forces it on.
    """

    def __init__(self, stream: TextIO | None = None, color: bool | None = None):
        self.stream = stream
        self.color = color

    def _write(
        self,
        text: str = "",
        fg: str | None = None,
        bold: bool = False,
        nl: bool = False,
    ) -> None:
        if fg is not None or bold:
            text = typer.style(text, fg=fg, bold=bold)
        typer.echo(text, file=self.stream, nl=nl, color=self.color)

    def _columns(self, counts: Counts, widths: HeaderWidths):
        return (
            ("Pass", counts.passes, widths.passes, PASS_COLOR),
            ("Fail", counts.fails, widths.fails, ERROR_COLOR),
            ("Error", counts.errors, widths.errors, ERROR_COLOR),
            ("Broken", counts.broken, widths.broken, BROKEN_COLOR),
        )

    def render_report(self, root: ResultTree) -> None:
        """Print the summary table for *root* and every test set below it."""
        counts = aggregate(root)
        align = max(column_alignment(root, 0), len(SUMMARY_LABEL))
        widths = HeaderWidths.from_counts(counts)

        self._write(_rpad(SUMMARY_LABEL, align) + " | ", bold=True)
        for label, _, width, color in self._columns(counts, widths):
            if width > 0:
                self._write(label.rjust(width) + "  ", fg=color, bold=True)
        if counts.total == 0:
            self._write(NO_TESTS, fg=INFO_COLOR, nl=True)
        else:
            self._write("Total".rjust(widths.total), fg=INFO_COLOR, bold=True, nl=True)

        self._print_counts(root, 0, align, widths)

    def _print_counts(
        self, node: ResultTree, depth: int, align: int, widths: HeaderWidths
    ) -> None:
        counts = aggregate(node)
        self._write(_rpad("  " * depth + node.description, align) + " | ")

        for _, count, width, color in self._columns(counts, widths):
            if count > 0:
                self._write(str(count).rjust(width) + "  ", fg=color)
            elif width > 0:
                self._write(" " * width + "  ")

        if counts.total == 0:
            self._write(NO_TESTS, fg=INFO_COLOR, nl=True)
        else:
            self._write(str(counts.total).rjust(widths.total), fg=INFO_COLOR, nl=True)

        for child in node.subtrees():
            self._print_counts(child, depth + 1, align, widths)

    def report_outcome(self, description: str, outcome: Outcome) -> None:
        """Print the detail of a failure or error as soon as it is recorded."""
        self._write(f"{description}: ", bold=True)
        self._write(outcome.render(), nl=True)
        # Errors render their own stack
        if outcome.kind is OutcomeKind.FAIL and outcome.stack:
            self._write("Stack (most recent call last):", nl=True)
            for frame in reversed(outcome.stack):
                self._write(frame.render(), nl=True)
        self._write(nl=True)

