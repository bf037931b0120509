"""Command-line interface for TapRunner."""

import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from taprunner import __version__
from taprunner.config import TapRunnerConfig, create_example_config
from taprunner.core.failure import HarnessError
from taprunner.core.harness import Harness, default_harness
from taprunner.core.models import RunResult, TestStatus

# stdout carries the TAP stream, everything else goes to stderr
console = Console(stderr=True)

# Reserved for load failures and harness misuse, above any clamped failure count
ERROR_EXIT = 255


@click.group()
@click.version_option(version=__version__, prog_name="taprunner")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: taprunner.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Trace execution on stderr")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """TapRunner - run registered tests and report them as TAP."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="taprunner.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(output: str, force: bool) -> None:
    """Initialize a new TapRunner configuration file."""
    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists:[/yellow] {output_path}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
        console.print(f"[green]Created configuration file:[/green] {output_path}")
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)


@main.command(context_settings={"ignore_unknown_options": True})
@click.argument("target")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.option("--summary", is_flag=True, help="Print a results table on stderr")
@click.pass_context
def run(ctx: click.Context, target: str, args: tuple[str, ...], summary: bool) -> None:
    """Import TARGET, run the tests it registers and exit with the failure count.

    TARGET is a path to a Python file or a dotted module name. Tests are taken
    from a module-level ``harness`` if there is one, else from the default
    harness. A module-level harness keeps the settings it was created with;
    the configuration file only sets up the default harness and the exit
    status limit. ARGS are passed through to the run.

    Exit status 255 means the suite could not be loaded or the harness was
    misused; failure counts are clamped below it.
    """
    config_path = ctx.obj.get("config_path")
    verbose = ctx.obj.get("verbose", False)

    try:
        config = TapRunnerConfig.load_or_default(config_path)
    except (FileNotFoundError, ValidationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(ERROR_EXIT)

    default_harness.configure(config.harness)
    default_harness.verbose = verbose
    default_harness.console = console

    try:
        module = load_target(target)
    except HarnessError as e:
        console.print(f"[red]Harness error:[/red] {e}")
        sys.exit(ERROR_EXIT)
    except Exception as e:
        console.print(f"[red]Cannot load {target}:[/red] {e}")
        sys.exit(ERROR_EXIT)

    harness = getattr(module, "harness", None)
    if not isinstance(harness, Harness):
        harness = default_harness

    if verbose:
        console.print(f"[dim]Loaded {len(harness.registry)} items from {target}[/dim]")

    try:
        result = harness.run_with_result([target, *args])
    except HarnessError as e:
        console.print(f"[red]Harness error:[/red] {e}")
        sys.exit(ERROR_EXIT)

    if summary:
        _display_results_summary(result)

    sys.exit(result.exit_code(config.harness.exit_code_limit))


def load_target(target: str) -> ModuleType:
    """Import a test module from a file path or a dotted module name."""
    path = Path(target)
    if path.suffix == ".py":
        if not path.exists():
            raise FileNotFoundError(f"Test file not found: {path}")
        spec = importlib.util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot import {path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = module
        spec.loader.exec_module(module)
        return module
    return importlib.import_module(target)


def _display_results_summary(result: RunResult) -> None:
    """Display a summary of test results."""
    table = Table(title="Test Results Summary")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Test")
    table.add_column("Status")

    for outcome in result.outcomes:
        if outcome.status == TestStatus.FAILED:
            status = "[red]failed[/red]"
        else:
            status = "[green]passed[/green]"
        table.add_row(str(outcome.number), outcome.name, status)

    console.print(table)

    if result.total > 0:
        pass_rate = (result.passed / result.total) * 100
        console.print(
            f"Passed [green]{result.passed}[/green], failed [red]{result.failed}[/red] "
            f"of {result.total} ({pass_rate:.1f}%)"
        )


if __name__ == "__main__":
    main()
