"""Progress reporting: a side channel fed from completed worker futures.

Observers only ever see completion events. They never influence the
result, which is merged in path order after the pool drains.
"""

from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)


@dataclass(frozen=True)
class FileCompleted:
    """One file finished pass one."""

    path: str
    completed: int
    total: int
    analyzed: bool


class AnalysisObserver:
    """Receives run progress. The default implementation ignores everything."""

    def on_start(self, total: int) -> None:
        pass

    def on_file_completed(self, event: FileCompleted) -> None:
        pass

    def on_finish(self) -> None:
        pass


class SilentObserver(AnalysisObserver):
    """No-op observer for tests, the API and --quiet mode."""


class RichProgressObserver(AnalysisObserver):
    """Rich progress bar on stderr."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self._progress: Optional[Progress] = None
        self._task = None

    def on_start(self, total: int) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        self._progress.start()
        self._task = self._progress.add_task("[cyan]Analyzing files...", total=total)

    def on_file_completed(self, event: FileCompleted) -> None:
        if self._progress is None:
            return
        self._progress.update(
            self._task,
            completed=event.completed,
            description=f"[cyan]{event.path}",
        )

    def on_finish(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
