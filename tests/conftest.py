"""Shared test fixtures for commitgate tests."""

import subprocess
from unittest.mock import MagicMock

import pytest

from commitgate.checks.base import CheckContext
from commitgate.config import CommitGateConfig
from commitgate.git import GitClient
from commitgate.models import StagedFileSet
from commitgate.process import ProcessResult
from commitgate.prompts import AutoConfirmer


class FakeRunner:
    """Records every command and answers from a per-executable script."""

    def __init__(self, results=None):
        # maps a predicate string (found anywhere in the argv) to a ProcessResult
        self.results = results or {}
        self.calls = []

    def run(self, args, cwd=None, timeout=None, stream=None):
        self.calls.append({"args": list(args), "cwd": cwd, "timeout": timeout, "stream": stream})
        for needle, result in self.results.items():
            if any(needle in arg for arg in args):
                if stream is not None and result.stdout:
                    stream.write(result.stdout)
                return result
        return ProcessResult(args=list(args), returncode=0)

    def calls_for(self, executable):
        return [c for c in self.calls if executable in c["args"]]


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def config(tmp_path):
    return CommitGateConfig(project_root=tmp_path)


@pytest.fixture
def git():
    mock = MagicMock(spec=GitClient)
    mock.reference.return_value = "HEAD"
    mock.diff_against.return_value = ""
    return mock


@pytest.fixture
def make_context(config, git, runner):
    def _make(staged=(), confirmer=None, out=None):
        return CheckContext(
            config=config,
            git=git,
            staged_files=StagedFileSet.from_paths(staged),
            runner=runner,
            confirmer=confirmer or AutoConfirmer(False),
            out=out,
        )

    return _make


def _git(cwd, *args):
    return subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    ).stdout


@pytest.fixture
def repo(tmp_path):
    """An empty git repository with a committer identity configured."""
    root = tmp_path / "repo"
    root.mkdir()
    _git(root, "init", "-q")
    _git(root, "config", "user.email", "dev@example.com")
    _git(root, "config", "user.name", "Dev")
    _git(root, "config", "commit.gpgsign", "false")
    return root


@pytest.fixture
def run_git():
    return _git
