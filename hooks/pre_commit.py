#!/usr/bin/env python3
"""Git pre-commit hook for commitgate.

Install by copying or symlinking this file to `.git/hooks/pre-commit`,
or use with the pre-commit framework:

    # .pre-commit-config.yaml
    repos:
      - repo: local
        hooks:
          - id: commitgate
            name: commitgate pre-commit checks
            entry: python -m commitgate precommit
            language: python
            always_run: true
            pass_filenames: false
"""

from __future__ import annotations

import subprocess
import sys


def build_command(argv: list[str]) -> list[str]:
    """Command that runs the pipeline; extra hook arguments are forwarded."""
    return [sys.executable, "-m", "commitgate", "precommit", *argv]


def main(argv: list[str] | None = None) -> int:
    """Run commitgate on the pending commit."""
    cmd = build_command(list(sys.argv[1:] if argv is None else argv))
    result = subprocess.run(cmd)
    return result.returncode


if __name__ == "__main__":
    sys.exit(main())
