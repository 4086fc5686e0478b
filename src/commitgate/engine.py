"""Core commitgate engine — runs the checks in order and produces a report."""

from __future__ import annotations

from typing import TextIO

from commitgate.checks import ALL_CHECKS, BaseCheck, CheckContext
from commitgate.config import CommitGateConfig
from commitgate.git import GitClient, GitError, extract_staged_files
from commitgate.models import CheckResult, PipelineReport, PipelineStage, StageOutcome
from commitgate.process import ProcessRunner
from commitgate.prompts import Confirmer, InteractiveConfirmer
from commitgate.run_token import RunToken

RETRY_MESSAGE = "Please check your mistakes and try again !"
DONE_MESSAGE = "Done !"

_CHECKING = {
    PipelineStage.DANGEROUS_FILES: "dangerous files",
    PipelineStage.COMPANION_FILES: "companion files",
    PipelineStage.LINT: "linter",
    PipelineStage.STATIC_ANALYSIS: "static analysis",
    PipelineStage.TESTS: "tests",
}


class PrecommitPipeline:
    """Runs the pre-commit checks as a linear state machine.

    ``IDLE → DANGEROUS_FILES → COMPANION_FILES → LINT → STATIC_ANALYSIS →
    TESTS → DONE``. The first failing check moves the run to ``FAILED`` and
    nothing after it runs. The run-token is cleared when a run starts and
    written again only when it reaches ``DONE``.
    """

    def __init__(
        self,
        config: CommitGateConfig,
        git: GitClient | None = None,
        runner: ProcessRunner | None = None,
        confirmer: Confirmer | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.config = config
        self.git = git or GitClient(config.project_root)
        self.runner = runner or ProcessRunner()
        self.confirmer = confirmer or InteractiveConfirmer()
        self.out = out
        self.token = RunToken(config.run_token_path)
        self._checks: list[BaseCheck] = [check_cls() for check_cls in ALL_CHECKS]

    def run(self) -> PipelineReport:
        """Run every check in order and return the report.

        The process is never exited here; callers map
        ``PipelineReport.exit_code`` to the process status.
        """
        report = PipelineReport()
        context = CheckContext(
            config=self.config,
            git=self.git,
            runner=self.runner,
            confirmer=self.confirmer,
            out=self.out,
        )
        self.token.clear()

        try:
            report.staged_files = extract_staged_files(self.git)
        except GitError as e:
            result = CheckResult.fail(f"Unable to determine the staged files: {e}")
            return self._fail(context, report, PipelineStage.IDLE, result)
        context.staged_files = report.staged_files

        for check in self._checks:
            report.stage = check.stage
            context.echo(f"* Checking {_CHECKING[check.stage]} ...")

            if not self.config.is_check_enabled(check.check_id):
                result = CheckResult.skipped()
                report.outcomes.append(StageOutcome(check.stage, result))
                context.echo("Skipped.")
                continue

            result = check.run(context)
            report.outcomes.append(StageOutcome(check.stage, result))
            if not result.passed:
                return self._fail(context, report, check.stage, result)
            context.echo(DONE_MESSAGE)

        report.stage = PipelineStage.DONE
        self.token.write()
        return report

    def _fail(
        self,
        context: CheckContext,
        report: PipelineReport,
        stage: PipelineStage,
        result: CheckResult,
    ) -> PipelineReport:
        report.stage = PipelineStage.FAILED
        report.failed_stage = stage
        report.failure = result
        if result.reason:
            context.echo(result.reason)
        context.echo(RETRY_MESSAGE)
        return report
