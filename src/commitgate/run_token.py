"""Run-token marker file: present only after a clean pipeline run."""

from __future__ import annotations

from pathlib import Path


class RunToken:
    """Marker file whose existence means the last run passed every check."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)

    def write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("", encoding="utf-8")
