"""Check 2 — Companion files.

A dependency manifest and its lock file are committed together so other
developers never install from a stale lock.
"""

from __future__ import annotations

from commitgate.checks.base import BaseCheck, CheckContext
from commitgate.models import CheckResult, PipelineStage


class CompanionFilesCheck(BaseCheck):
    """Check 2: Fail when a manifest is staged without its lock file."""

    name = "Companion files"
    check_id = "companion_files"
    stage = PipelineStage.COMPANION_FILES

    def run(self, context: CheckContext) -> CheckResult:
        staged = context.staged_files
        for pair in context.config.companions:
            if pair.manifest in staged and pair.lock not in staged:
                return CheckResult.fail(
                    f"{pair.lock} must be committed if {pair.manifest} is modified!"
                )
        return CheckResult.ok()
