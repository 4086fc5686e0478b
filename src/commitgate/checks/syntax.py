"""Check 3 — Syntax.

Every staged source file is passed to the configured syntax validator
(``php -l`` by default). Files with other extensions are not checked.
"""

from __future__ import annotations

from commitgate.checks.base import BaseCheck, CheckContext
from commitgate.models import CheckResult, PipelineStage


class SyntaxCheck(BaseCheck):
    """Check 3: Validate the syntax of each staged source file."""

    name = "Linter"
    check_id = "lint"
    stage = PipelineStage.LINT

    def run(self, context: CheckContext) -> CheckResult:
        config = context.config
        for file in context.staged_files.with_suffix(config.lint_extensions):
            result = context.runner.run(
                [*config.lint_command, file],
                cwd=config.project_root,
            )
            if not result.successful:
                return CheckResult.fail(
                    f"`{file}` failed the syntax check.\n{result.error_output}"
                )
        return CheckResult.ok()
