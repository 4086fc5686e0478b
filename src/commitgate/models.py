"""Data models for commitgate."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator


class CheckStatus(str, Enum):
    """Outcome of a single check unit."""

    PASS = "PASS"
    FAIL = "FAIL"
    SKIPPED = "SKIPPED"


class PipelineStage(str, Enum):
    """States of the pre-commit pipeline, in execution order."""

    IDLE = "idle"
    DANGEROUS_FILES = "dangerous-files"
    COMPANION_FILES = "companion-files"
    LINT = "lint"
    STATIC_ANALYSIS = "static-analysis"
    TESTS = "tests"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class CheckResult:
    """Verdict produced by a check unit."""

    status: CheckStatus
    reason: str = ""

    @classmethod
    def ok(cls) -> CheckResult:
        return cls(CheckStatus.PASS)

    @classmethod
    def fail(cls, reason: str) -> CheckResult:
        return cls(CheckStatus.FAIL, reason)

    @classmethod
    def skipped(cls) -> CheckResult:
        return cls(CheckStatus.SKIPPED)

    @property
    def passed(self) -> bool:
        """True unless the check failed. Skipped checks do not block."""
        return self.status != CheckStatus.FAIL

    def to_dict(self) -> dict:
        return {"status": self.status.value, "reason": self.reason}


@dataclass(frozen=True)
class StagedFileSet:
    """Repository-relative paths staged for the pending commit.

    Order is preserved for deterministic output; duplicates are dropped.
    """

    paths: tuple[str, ...] = ()

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> StagedFileSet:
        seen: dict[str, None] = {}
        for path in paths:
            if path:
                seen.setdefault(path, None)
        return cls(tuple(seen))

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def __contains__(self, path: object) -> bool:
        return path in self.paths

    def with_suffix(self, suffixes: Iterable[str]) -> list[str]:
        """Paths ending with any of the given suffixes."""
        wanted = tuple(suffixes)
        if not wanted:
            return []
        return [p for p in self.paths if p.endswith(wanted)]

    def matching(self, pattern: str | re.Pattern) -> list[str]:
        """Paths matched by a regular expression."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        return [p for p in self.paths if regex.search(p)]


@dataclass(frozen=True)
class StageOutcome:
    """The result recorded for one pipeline stage."""

    stage: PipelineStage
    result: CheckResult

    def to_dict(self) -> dict:
        return {"stage": self.stage.value, **self.result.to_dict()}


@dataclass
class PipelineReport:
    """Run-scoped state and outcome of a pipeline run."""

    stage: PipelineStage = PipelineStage.IDLE
    staged_files: StagedFileSet = field(default_factory=StagedFileSet)
    outcomes: list[StageOutcome] = field(default_factory=list)
    failed_stage: PipelineStage | None = None
    failure: CheckResult | None = None

    @property
    def succeeded(self) -> bool:
        return self.stage == PipelineStage.DONE

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1

    def to_dict(self) -> dict:
        return {
            "stage": self.stage.value,
            "succeeded": self.succeeded,
            "staged_files": list(self.staged_files),
            "outcomes": [o.to_dict() for o in self.outcomes],
            "failed_stage": self.failed_stage.value if self.failed_stage else None,
            "failure": self.failure.reason if self.failure else None,
        }
