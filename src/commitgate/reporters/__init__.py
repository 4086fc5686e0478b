"""Run reporters for commitgate."""

from commitgate.reporters.json_reporter import JSONReporter

__all__ = ["JSONReporter"]
