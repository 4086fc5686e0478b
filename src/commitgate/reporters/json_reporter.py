"""JSON run reporter for commitgate."""

from __future__ import annotations

import json
from pathlib import Path

from commitgate.models import PipelineReport


class JSONReporter:
    """Serialize a PipelineReport to JSON format."""

    def render(self, report: PipelineReport) -> str:
        """Render the report as a JSON string."""
        return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)

    def write(self, report: PipelineReport, output_path: str | Path) -> None:
        """Write the report to a JSON file, creating parent directories.

        Args:
            report: The pipeline report to serialize.
            output_path: Path to the output file.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(report), encoding="utf-8")
