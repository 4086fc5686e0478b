"""Git queries and staged-file extraction for commitgate."""

from __future__ import annotations

import subprocess
from pathlib import Path

from commitgate.models import StagedFileSet

# Object id of the empty tree; used as the comparison base before the first commit.
EMPTY_TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

_STAGED_STATUSES = ("A", "M")


class GitError(RuntimeError):
    """Raised when a git command fails or git is unavailable."""


class GitClient:
    """Thin wrapper around the ``git`` executable for one repository."""

    def __init__(self, root: str | Path = ".") -> None:
        self.root = Path(root)

    def _run(self, *args: str) -> str:
        cmd = ["git", *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=True,
                cwd=self.root,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise GitError(f"`{' '.join(cmd)}` failed: {stderr}") from e
        except FileNotFoundError as e:
            raise GitError("git is not installed or not in PATH") from e
        return result.stdout

    def toplevel(self) -> Path:
        return Path(self._run("rev-parse", "--show-toplevel").strip())

    def has_commits(self) -> bool:
        try:
            self._run("rev-parse", "--verify", "--quiet", "HEAD")
        except GitError:
            return False
        return True

    def last_commit_id(self) -> str | None:
        if not self.has_commits():
            return None
        return self._run("log", "--format=%H", "-n", "1").strip() or None

    def reference(self) -> str:
        """Comparison base: the last commit, or the empty tree before the first one."""
        return self.last_commit_id() or EMPTY_TREE

    def snapshot_index(self) -> str:
        """Write the current index as a tree object and return its id."""
        return self._run("write-tree").strip()

    def restore_index(self, tree: str) -> None:
        self._run("read-tree", tree)

    def stage_all(self) -> None:
        self._run("add", "-A")

    def diff_index(self, reference: str) -> list[tuple[str, str]]:
        """Return ``(status, path)`` pairs for the index compared to ``reference``."""
        output = self._run("diff-index", "--cached", "--name-status", "-z", reference)
        fields = output.split("\0")
        entries: list[tuple[str, str]] = []
        i = 0
        while i < len(fields):
            status = fields[i]
            if not status:
                i += 1
                continue
            # Copies and renames carry two paths; keep the destination.
            width = 2 if status[0] in ("C", "R") else 1
            paths = fields[i + 1 : i + 1 + width]
            if len(paths) == width:
                entries.append((status, paths[-1]))
            i += 1 + width
        return entries

    def diff_against(self, reference: str, path: str) -> str:
        """Working-tree diff of ``path`` against ``reference``."""
        return self._run("diff", reference, "--", path)

    def commit(self, message: str) -> str:
        """Stage everything and commit.

        The hook is bypassed because the checks have just run.
        """
        self.stage_all()
        return self._run("commit", "--no-verify", "-m", message)


def extract_staged_files(git: GitClient) -> StagedFileSet:
    """Return the files added or modified for the pending commit.

    Working-tree changes are staged for the comparison so that the checks
    see them, then the index is put back exactly as the user left it.
    """
    snapshot = git.snapshot_index()
    try:
        git.stage_all()
        entries = git.diff_index(git.reference())
    finally:
        git.restore_index(snapshot)
    return StagedFileSet.from_paths(
        path for status, path in entries if status[:1] in _STAGED_STATUSES
    )
