"""Rich terminal formatter for messmeter."""

import io
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..metrics import display_names
from ..models import AggregateReport, Severity
from .base import BaseFormatter


def _score_style(score: float) -> str:
    if score >= 60:
        return "red bold"
    elif score >= 40:
        return "red"
    elif score >= 20:
        return "yellow"
    else:
        return "green"


def _score(score: float) -> str:
    style = _score_style(score)
    return f"[{style}]{score:.1f}[/{style}]"


_SEVERITY_MARKUP = {
    Severity.CRITICAL: "[red bold]critical[/red bold]",
    Severity.WARNING: "[yellow]warning[/yellow]",
    Severity.INFO: "[dim]info[/dim]",
}


class RichFormatter(BaseFormatter):
    """Summary panel, per-metric table and the worst files with their findings."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, report: AggregateReport) -> None:
        self._print(report, self.console)

    def format(self, report: AggregateReport) -> str:
        buffer = io.StringIO()
        self._print(report, Console(file=buffer, width=100, color_system=None))
        return buffer.getvalue()

    def _print(self, report: AggregateReport, console: Console) -> None:
        if report.is_empty:
            console.print("[yellow]No analyzable source files found.[/yellow]")
            self._print_unanalyzed(report, console)
            return

        console.print(
            Panel(
                f"Mess score: {_score(report.score)} / 100  "
                f"([bold]{report.quality_level.label}[/bold])\n"
                f"{report.total_files} files, {report.total_lines} lines "
                f"({report.total_code_lines} code)",
                title="[bold cyan]messmeter[/bold cyan]",
                expand=False,
            )
        )
        console.print()
        self._print_metrics(report, console)
        self._print_files(report, console)
        self._print_unanalyzed(report, console)

    @staticmethod
    def _print_metrics(report: AggregateReport, console: Console) -> None:
        names = display_names()
        table = Table(title="Metrics", show_header=True, header_style="bold")
        table.add_column("Metric", style="cyan")
        table.add_column("Score", justify="right", width=8)
        for name, value in report.metric_scores.items():
            table.add_row(names.get(name, name), _score(value))
        console.print(table)
        console.print()

    @staticmethod
    def _print_files(report: AggregateReport, console: Console) -> None:
        if not report.files:
            return
        console.print(f"[bold cyan]TOP {len(report.files)} FILES REQUIRING ATTENTION")
        console.print()
        for i, file_report in enumerate(report.files, 1):
            console.print(
                f"[bold yellow]{i}. {file_report.path}[/bold yellow] "
                f"[dim]({file_report.record.language})[/dim]  "
                f"composite {_score(file_report.composite_score)}  "
                f"issues {_score(file_report.issue_score)}"
            )
            for finding in file_report.findings:
                console.print(
                    f"     {_SEVERITY_MARKUP[finding.severity]} "
                    f"L{finding.line} [dim]{finding.metric}[/dim] {finding.message}",
                    highlight=False,
                )
            console.print()

    @staticmethod
    def _print_unanalyzed(report: AggregateReport, console: Console) -> None:
        if not report.unanalyzed:
            return
        counts = {}
        for item in report.unanalyzed:
            counts[item.reason.value] = counts.get(item.reason.value, 0) + 1
        summary = ", ".join(f"{n} {reason}" for reason, n in sorted(counts.items()))
        console.print(f"[dim]Skipped {len(report.unanalyzed)} files: {summary}[/dim]")
