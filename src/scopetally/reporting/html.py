from __future__ import annotations

from pathlib import Path
from typing import Any

from scopetally.aggregate import HeaderWidths, aggregate, unstyle
from scopetally.tree import ResultTree


def _build_node(node: ResultTree) -> dict[str, Any]:
    """Return nested dict of a test set: counts, non-pass outcomes, children."""
    counts = aggregate(node)
    outcomes = [
        {
            "kind": outcome.kind.value,
            "detail": outcome.render(),
            "stack": [frame.render().strip() for frame in reversed(outcome.stack or ())],
        }
        for outcome in node.outcomes()
    ]
    return {
        "description": unstyle(node.description),
        "counts": counts.to_dict(),
        "total": counts.total,
        "failed": node.has_non_pass,
        "outcomes": outcomes,
        "children": [_build_node(child) for child in node.subtrees()],
    }


def write_html(root: ResultTree, path: Path) -> Path:
    """Render the result tree to a standalone HTML page, return path."""
    from jinja2 import Environment, FileSystemLoader

    counts = aggregate(root)
    widths = HeaderWidths.from_counts(counts)
    columns = [
        (name, label)
        for name, label, width in (
            ("passes", "Pass", widths.passes),
            ("fails", "Fail", widths.fails),
            ("errors", "Error", widths.errors),
            ("broken", "Broken", widths.broken),
        )
        if width > 0
    ]

    tmpl_dir = Path(__file__).parent / "templates"
    env = Environment(loader=FileSystemLoader(str(tmpl_dir)), autoescape=True)
    template = env.get_template("report.html.j2")

    html = template.render(
        root=_build_node(root),
        columns=columns,
        totals=counts.to_dict(),
        grand_total=counts.total,
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    return path
