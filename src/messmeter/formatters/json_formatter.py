"""JSON formatter for messmeter."""

import json

from ..models import AggregateReport
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the report as JSON."""

    def render(self, report: AggregateReport) -> None:
        print(self.format(report))

    def format(self, report: AggregateReport) -> str:
        return json.dumps(report.to_dict(), indent=2, sort_keys=False)
