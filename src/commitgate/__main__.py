"""commitgate CLI entry point.

Usage:
    commitgate precommit [MESSAGE] [--config PATH] [--path DIR] [--yes] [--report PATH]
    python -m commitgate precommit [options]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from commitgate.config import CONFIG_FILENAME, CommitGateConfig, ConfigError
from commitgate.engine import PrecommitPipeline
from commitgate.git import GitClient, GitError
from commitgate.prompts import AutoConfirmer, InteractiveConfirmer
from commitgate.reporters.json_reporter import JSONReporter


def _resolve_project_root(path: str | None) -> Path:
    """Use the enclosing git work tree when there is one."""
    start = Path(path or ".").resolve()
    try:
        return GitClient(start).toplevel()
    except GitError:
        return start


def precommit_command(args: argparse.Namespace) -> int:
    """Execute the precommit command."""
    root = _resolve_project_root(args.path)

    try:
        config = CommitGateConfig.load(args.config, project_root=root)
    except ConfigError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    if config.source is None:
        print(
            f"⚠️  No configuration file found in `{root / CONFIG_FILENAME}`, using defaults.",
            file=sys.stderr,
        )

    print("🔍 commitgate: checking your code before committing", file=sys.stderr)

    git = GitClient(root)
    confirmer = AutoConfirmer(True) if args.yes else InteractiveConfirmer()
    pipeline = PrecommitPipeline(config, git=git, confirmer=confirmer)
    report = pipeline.run()

    if args.report:
        JSONReporter().write(report, args.report)
        print(f"📁 Report written to {args.report}", file=sys.stderr)

    if not report.succeeded:
        print(f"\n🚫 Precommit failed at: {report.failed_stage.value}", file=sys.stderr)
        return report.exit_code

    print("\n✅ You passed the precommit! Great job!", file=sys.stderr)

    if args.message:
        try:
            output = git.commit(args.message)
        except GitError as e:
            print(f"❌ Commit failed: {e}", file=sys.stderr)
            return 1
        print(output.rstrip("\n"))

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="commitgate",
        description="commitgate — check your code before you commit",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    precommit_parser = subparsers.add_parser(
        "precommit",
        help="Run the pre-commit checks, then optionally commit",
    )
    precommit_parser.add_argument(
        "message",
        nargs="?",
        default=None,
        help="Commit message; when given, everything is committed after a clean run",
    )
    precommit_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to {CONFIG_FILENAME} config file",
    )
    precommit_parser.add_argument(
        "--path",
        type=str,
        default=None,
        help="Project directory (default: the enclosing git work tree)",
    )
    precommit_parser.add_argument(
        "--yes",
        action="store_true",
        help="Approve dangerous file changes without asking",
    )
    precommit_parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Write a JSON report of the run to this path",
    )

    return parser


def main() -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "precommit":
        sys.exit(precommit_command(args))
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":  # pragma: no cover
    main()
