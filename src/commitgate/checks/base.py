"""Abstract base class and shared context for all pre-commit checks."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TextIO

from commitgate.config import CommitGateConfig
from commitgate.git import GitClient
from commitgate.models import CheckResult, PipelineStage, StagedFileSet
from commitgate.process import ProcessRunner
from commitgate.prompts import AutoConfirmer, Confirmer


@dataclass
class CheckContext:
    """Everything a check may read during one pipeline run.

    Built once per run by the pipeline; ``staged_files`` is filled in after
    extraction. The pipeline prints its own progress through ``echo`` too.
    """

    config: CommitGateConfig
    git: GitClient
    staged_files: StagedFileSet = field(default_factory=StagedFileSet)
    runner: ProcessRunner = field(default_factory=ProcessRunner)
    confirmer: Confirmer = field(default_factory=lambda: AutoConfirmer(False))
    out: TextIO | None = None

    @property
    def stream(self) -> TextIO:
        """Operator output; resolved late so redirected stdout is honoured."""
        return self.out if self.out is not None else sys.stdout

    def echo(self, message: str = "") -> None:
        print(message, file=self.stream)


class BaseCheck(ABC):
    """Base class for commitgate check units.

    A check inspects the pending commit and returns a ``CheckResult``. It
    never exits the process; the pipeline decides what a failure means.
    """

    # Subclasses must set these
    name: str = ""
    check_id: str = ""
    stage: PipelineStage = PipelineStage.IDLE

    @abstractmethod
    def run(self, context: CheckContext) -> CheckResult:
        """Run the check against the pending commit.

        Args:
            context: Configuration, staged files and collaborators for this run.

        Returns:
            ``CheckResult.ok()`` to let the pipeline continue, or
            ``CheckResult.fail(reason)`` to stop it.
        """
        ...  # pragma: no cover
