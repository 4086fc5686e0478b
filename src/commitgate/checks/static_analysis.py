"""Check 4 — Static analysis.

Staged files under the source tree (``analysis.pattern``) are analysed one
at a time with the configured tool, PHPMD with the ``controversial`` rule
set by default. ``{file}`` in the command is replaced by the staged path.
"""

from __future__ import annotations

from commitgate.checks.base import BaseCheck, CheckContext
from commitgate.models import CheckResult, PipelineStage

FILE_PLACEHOLDER = "{file}"


def build_command(template: list[str], file: str) -> list[str]:
    """Substitute ``file`` into the command, appending it if there is no placeholder."""
    if not any(FILE_PLACEHOLDER in arg for arg in template):
        return [*template, file]
    return [arg.replace(FILE_PLACEHOLDER, file) for arg in template]


class StaticAnalysisCheck(BaseCheck):
    """Check 4: Run the static analyzer on staged source files."""

    name = "Static analysis"
    check_id = "static_analysis"
    stage = PipelineStage.STATIC_ANALYSIS

    def run(self, context: CheckContext) -> CheckResult:
        config = context.config
        for file in context.staged_files.matching(config.analysis_pattern):
            context.echo(f"{file} analysis in progress ...")
            result = context.runner.run(
                build_command(config.analysis_command, file),
                cwd=config.project_root,
            )
            if not result.successful:
                parts = [f"`{file}` failed the static analysis."]
                parts.extend(p for p in (result.stderr.strip(), result.stdout.strip()) if p)
                return CheckResult.fail("\n".join(parts))
        return CheckResult.ok()
