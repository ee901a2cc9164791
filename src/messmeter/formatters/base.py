"""Base formatter interface for messmeter output rendering."""

from abc import ABC, abstractmethod

from ..models import AggregateReport


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, report: AggregateReport) -> None:
        """Render the report to the terminal."""

    @abstractmethod
    def format(self, report: AggregateReport) -> str:
        """Return the formatted report as a string (for --output)."""
