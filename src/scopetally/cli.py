from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="scopetally", help="Run nested test sets and summarize results")


@app.callback()
def main() -> None:
    """Run nested test sets and summarize results."""


@app.command()
def run(
    file: str = typer.Argument(help="Python file declaring describe/it/test blocks"),
    config: str | None = typer.Option(None, help="Path to report YAML config"),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Do not print failures or the summary table"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    log_file: str | None = typer.Option(None, help="Write debug log to this file"),
    html: str | None = typer.Option(None, help="Write an HTML report to this file"),
    color: bool | None = typer.Option(
        None, "--color/--no-color", help="Force colored output on or off"
    ),
):
    """Run a test file inside a root test set and report the results."""
    import runpy

    from pydantic import ValidationError
    import yaml

    from scopetally.config import ReportConfig, load_config
    from scopetally.lifecycle import (
        ScopeStack,
        print_enabled,
        reset_stack,
        set_print_enabled,
        use_stack,
    )
    from scopetally.reporting.console import ConsoleReporter
    from scopetally.stack import StackScrubber
    from scopetally.verbose import setup_logger

    test_path = Path(file)
    if not test_path.exists():
        typer.echo(f"Error: test file not found: {file}", err=True)
        raise typer.Exit(1)

    report_config = ReportConfig()
    if config is not None:
        config_path = Path(config)
        if not config_path.exists():
            typer.echo(f"Error: config file not found: {config}", err=True)
            raise typer.Exit(1)
        try:
            report_config = load_config(config_path)
        except (ValidationError, ValueError, yaml.YAMLError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    # Command line options override the config file
    if quiet:
        report_config.print_enabled = False
    if color is not None:
        report_config.color = color
    if html is not None:
        report_config.html = html
    if log_file is not None:
        report_config.log_file = log_file

    logger = setup_logger(
        Path(report_config.log_file) if report_config.log_file else None,
        verbose=verbose,
        logger_name="scopetally",
    )
    logger.debug(f"Running test file {test_path}")

    stack = ScopeStack(
        reporter=ConsoleReporter(color=report_config.color),
        # runpy frames sit between this command and the test file
        scrubber=StackScrubber.default(report_config.internal_paths, modules=[runpy]),
        logger=logger,
    )
    previous_print = print_enabled()
    set_print_enabled(report_config.print_enabled)
    token = use_stack(stack)
    try:
        root = stack.open(test_path.name)
        try:
            runpy.run_path(str(test_path), run_name="__main__")
        except Exception as e:
            stack.record_exception(e, root)
        result = stack.close()
    finally:
        reset_stack(token)
        set_print_enabled(previous_print)

    if report_config.html:
        from scopetally.reporting.html import write_html

        report_path = write_html(result.tree, Path(report_config.html))
        typer.echo(f"Report: {report_path}")

    # Exit with non-zero if any check failed or errored
    if result.failed:
        typer.echo(str(result.failure), err=True)
        raise typer.Exit(1)
