"""Check 1 — Dangerous files.

Files listed under ``files.dangerous`` (deployment configs and the like)
may only be deleted or modified after the operator confirms it. Every
configured file is examined and every change is confirmed individually.
"""

from __future__ import annotations

from commitgate.checks.base import BaseCheck, CheckContext
from commitgate.git import GitError
from commitgate.models import CheckResult, PipelineStage

CONFIRM_QUESTION = "Can you confirm ?"
DECLINED_REASON = "Be careful when modifying dangerous files."


class DangerousFilesCheck(BaseCheck):
    """Check 1: Ask for confirmation before dangerous files change."""

    name = "Dangerous files"
    check_id = "dangerous_files"
    stage = PipelineStage.DANGEROUS_FILES

    def run(self, context: CheckContext) -> CheckResult:
        spec = context.config.dangerous_files
        if not spec:
            context.echo("No dangerous files found.")
            return CheckResult.ok()

        try:
            reference = context.git.reference()
        except GitError as e:
            return CheckResult.fail(str(e))

        declined: list[str] = []
        for rel_path in spec:
            path = context.config.project_root / rel_path

            if not path.exists():
                context.echo(f"⚠️  A dangerous file is missing: `{rel_path}`")
                context.echo("You might delete it.")
                if not context.confirmer.confirm(CONFIRM_QUESTION):
                    declined.append(rel_path)
                continue

            try:
                diff = context.git.diff_against(reference, rel_path)
            except GitError as e:
                return CheckResult.fail(str(e))

            if not diff.strip():
                continue

            context.echo(f"⚠️  A dangerous file has changed: `{rel_path}`")
            context.echo("You might change it.")
            context.echo(diff.rstrip("\n"))
            if not context.confirmer.confirm(CONFIRM_QUESTION):
                declined.append(rel_path)

        if declined:
            listing = "\n".join(f"  - {p}" for p in declined)
            return CheckResult.fail(f"{DECLINED_REASON}\n{listing}")
        return CheckResult.ok()
