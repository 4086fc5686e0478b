"""Tests for git queries and staged-file extraction."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from commitgate.git import EMPTY_TREE, GitClient, GitError, extract_staged_files


class TestGitClient:
    def test_runs_in_root(self, tmp_path):
        with patch("commitgate.git.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="abc\n")
            GitClient(tmp_path).snapshot_index()
            assert mock_run.call_args[0][0] == ["git", "write-tree"]
            assert mock_run.call_args[1]["cwd"] == tmp_path

    def test_git_error_is_raised(self):
        with patch("commitgate.git.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.CalledProcessError(
                128, "git", stderr="fatal: not a git repository"
            )
            with pytest.raises(GitError, match="not a git repository"):
                GitClient().toplevel()

    def test_git_not_found(self):
        with patch("commitgate.git.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(GitError, match="not installed"):
                GitClient().stage_all()

    def test_reference_without_commits_is_empty_tree(self):
        with patch("commitgate.git.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.CalledProcessError(1, "git", stderr="")
            assert GitClient().reference() == EMPTY_TREE

    def test_reference_with_commits_is_last_commit(self):
        with patch("commitgate.git.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="0" * 40 + "\n")
            assert GitClient().reference() == "0" * 40
            assert mock_run.call_args[0][0] == ["git", "log", "--format=%H", "-n", "1"]

    def test_output_is_decoded_leniently(self):
        with patch("commitgate.git.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="")
            GitClient().stage_all()
            assert mock_run.call_args[1]["encoding"] == "utf-8"
            assert mock_run.call_args[1]["errors"] == "replace"

    def test_diff_index_parses_name_status(self):
        output = "M\0src/Foo.php\0A\0composer.lock\0D\0old.php\0R100\0a.php\0b.php\0"
        with patch("commitgate.git.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout=output)
            entries = GitClient().diff_index("HEAD")
            cmd = mock_run.call_args[0][0]
        assert cmd == ["git", "diff-index", "--cached", "--name-status", "-z", "HEAD"]
        assert entries == [
            ("M", "src/Foo.php"),
            ("A", "composer.lock"),
            ("D", "old.php"),
            ("R100", "b.php"),
        ]

    def test_diff_against(self):
        with patch("commitgate.git.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="diff text")
            assert GitClient().diff_against("HEAD", "app/config.yml") == "diff text"
            assert mock_run.call_args[0][0] == ["git", "diff", "HEAD", "--", "app/config.yml"]

    def test_commit_skips_hook(self):
        with patch("commitgate.git.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="[main abc] msg")
            GitClient().commit("msg")
            commands = [c[0][0] for c in mock_run.call_args_list]
        assert commands == [
            ["git", "add", "-A"],
            ["git", "commit", "--no-verify", "-m", "msg"],
        ]


class TestExtractStagedFiles:
    def test_filters_added_and_modified(self):
        git = MagicMock(spec=GitClient)
        git.snapshot_index.return_value = "tree123"
        git.reference.return_value = "HEAD"
        git.diff_index.return_value = [
            ("M", "src/Foo.php"),
            ("D", "src/Gone.php"),
            ("A", "composer.json"),
            ("T", "link"),
        ]
        staged = extract_staged_files(git)
        assert list(staged) == ["src/Foo.php", "composer.json"]
        git.stage_all.assert_called_once()
        git.restore_index.assert_called_once_with("tree123")

    def test_restores_index_on_failure(self):
        git = MagicMock(spec=GitClient)
        git.snapshot_index.return_value = "tree123"
        git.reference.return_value = "HEAD"
        git.diff_index.side_effect = GitError("boom")
        with pytest.raises(GitError):
            extract_staged_files(git)
        git.restore_index.assert_called_once_with("tree123")


class TestExtractInRealRepository:
    def test_first_commit_sees_unstaged_files(self, repo, run_git):
        (repo / "composer.json").write_text("{}")
        (repo / "README.md").write_text("hi")
        run_git(repo, "add", "README.md")

        staged = extract_staged_files(GitClient(repo))

        assert sorted(staged) == ["README.md", "composer.json"]
        # user's staging intent is untouched
        status = run_git(repo, "status", "--porcelain")
        assert "A  README.md" in status
        assert "?? composer.json" in status

    def test_excludes_deleted_files(self, repo, run_git):
        (repo / "keep.php").write_text("<?php\n")
        (repo / "gone.php").write_text("<?php\n")
        run_git(repo, "add", "-A")
        run_git(repo, "commit", "-q", "-m", "init")

        (repo / "gone.php").unlink()
        (repo / "keep.php").write_text("<?php echo 1;\n")

        staged = extract_staged_files(GitClient(repo))

        assert list(staged) == ["keep.php"]
        assert run_git(repo, "diff", "--cached", "--name-only") == ""

    def test_last_commit_id(self, repo, run_git):
        client = GitClient(repo)
        assert client.last_commit_id() is None
        (repo / "a.txt").write_text("a")
        run_git(repo, "add", "-A")
        run_git(repo, "commit", "-q", "-m", "init")
        assert client.last_commit_id() == run_git(repo, "rev-parse", "HEAD").strip()

    def test_reference_follows_last_commit(self, repo, run_git):
        client = GitClient(repo)
        assert client.reference() == EMPTY_TREE
        (repo / "a.txt").write_text("a")
        run_git(repo, "add", "-A")
        run_git(repo, "commit", "-q", "-m", "init")
        assert client.reference() == client.last_commit_id()
