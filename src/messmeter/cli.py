"""Command-line interface for messmeter"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from . import __version__
from .config import AnalysisConfig, load_config
from .core import CodebaseAnalyzer, RichProgressObserver, SilentObserver
from .exceptions import MessMeterError
from .formatters import get_formatter
from .logging_config import get_logger, setup_logging

app = typer.Typer(
    name="messmeter",
    help="messmeter - how messy is this codebase?",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]messmeter[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


def _resolve_config(
    config: Optional[Path],
    top: Optional[int],
    max_issues: Optional[int],
    workers: Optional[int],
    exclude: List[str],
    verbose: bool,
    quiet: bool,
) -> AnalysisConfig:
    """Build configuration from CLI options (highest priority)."""
    overrides = {}
    if top is not None:
        overrides["top_files"] = top
    if max_issues is not None:
        overrides["max_findings_per_file"] = max_issues
    if workers is not None:
        overrides["workers"] = workers
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    if exclude:
        overrides["exclude_patterns"] = list(AnalysisConfig().exclude_patterns) + list(exclude)
    return load_config(config_file=config, **overrides)


@app.command()
def main(
    path: Path = typer.Argument(
        Path("."),
        help="Directory or file to analyze",
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        "-t",
        help="Number of worst files to show (default: 5)",
        min=1,
        max=1000,
    ),
    max_issues: Optional[int] = typer.Option(
        None,
        "--max-issues",
        "-m",
        help="Findings shown per file (default: 5)",
        min=1,
        max=1000,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (default), json",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the report to this file instead of the terminal",
        dir_okay=False,
    ),
    exclude: List[str] = typer.Option(
        [],
        "--exclude",
        "-e",
        help="Additional glob pattern to exclude (repeatable)",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Number of parallel workers (default: CPU count)",
        min=1,
        max=64,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        dir_okay=False,
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append DEBUG logs to this file",
        dir_okay=False,
    ),
    fail_above: Optional[float] = typer.Option(
        None,
        "--fail-above",
        help="Exit 1 if the project score exceeds this value (for CI gating)",
        min=0.0,
        max=100.0,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging and the progress bar",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Score every source file on seven quality metrics and rank the worst.

    [bold cyan]Examples:[/bold cyan]

      messmeter /path/to/project

      messmeter . --top 10 --max-issues 3

      messmeter . --format json | jq .score

      messmeter . --exclude "tests/*" --fail-above 40
    """
    if verbose and quiet:
        err_console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)

    valid_formats = {"rich", "json"}
    if fmt not in valid_formats:
        err_console.print(f"[red]Error:[/red] --format must be one of: {', '.join(sorted(valid_formats))}")
        raise typer.Exit(1)

    try:
        settings = _resolve_config(config, top, max_issues, workers, exclude, verbose, quiet)
        setup_logging(settings.verbosity, log_file=str(log_file) if log_file else None, console=err_console)
        logger.debug(f"Loaded configuration: {settings}")

        show_progress = fmt == "rich" and settings.verbosity != "quiet" and output is None
        observer = RichProgressObserver(err_console) if show_progress else SilentObserver()
        analyzer = CodebaseAnalyzer(settings, observer=observer)
        report = analyzer.analyze_directory(path)

        formatter = get_formatter(fmt)
        if output is not None:
            output.write_text(formatter.format(report), encoding="utf-8")
            if settings.verbosity != "quiet":
                err_console.print(f"[green]Report written to {output}[/green]")
        else:
            formatter.render(report)

        if fail_above is not None and report.score > fail_above:
            if fmt == "rich":
                err_console.print(
                    f"[red]FAIL:[/red] score {report.score:.1f} exceeds threshold {fail_above:.1f}"
                )
            raise typer.Exit(1)

    except MessMeterError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)


if __name__ == "__main__":
    app()
