"""Configuration management for commitgate."""

from __future__ import annotations

import copy
import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml  # type: ignore

CONFIG_FILENAME = ".commitgate.yml"

_DEFAULT_CONFIG: dict[str, Any] = {
    "files": {"dangerous": []},
    "companions": [{"manifest": "composer.json", "lock": "composer.lock"}],
    "lint": {
        "command": ["php", "-l"],
        "extensions": [".php", ".inc"],
    },
    "analysis": {
        "command": ["php", "vendor/bin/phpmd", "{file}", "text", "controversial"],
        "pattern": r"^src/(.*)(\.php)$",
    },
    "tests": {
        "command": ["phpunit"],
        "timeout": 3600,
    },
    "run_token": ".commitgate/cache/precommit.token",
    "checks": {},
}


class ConfigError(ValueError):
    """Raised when a configuration file cannot be parsed or is malformed."""


@dataclass(frozen=True)
class DangerousFileSpec:
    """Repository-relative paths that need confirmation before they change."""

    paths: tuple[str, ...] = ()

    def __iter__(self):
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)


@dataclass(frozen=True)
class CompanionPair:
    """A manifest and the lock file that must be committed along with it."""

    manifest: str
    lock: str


@dataclass
class CommitGateConfig:
    """Full commitgate configuration loaded from `.commitgate.yml`."""

    project_root: Path = field(default_factory=Path.cwd)
    dangerous_files: DangerousFileSpec = field(default_factory=DangerousFileSpec)
    companions: list[CompanionPair] = field(
        default_factory=lambda: [CompanionPair("composer.json", "composer.lock")]
    )
    lint_command: list[str] = field(default_factory=lambda: ["php", "-l"])
    lint_extensions: list[str] = field(default_factory=lambda: [".php", ".inc"])
    analysis_command: list[str] = field(
        default_factory=lambda: ["php", "vendor/bin/phpmd", "{file}", "text", "controversial"]
    )
    analysis_pattern: str = r"^src/(.*)(\.php)$"
    tests_command: list[str] = field(default_factory=lambda: ["phpunit"])
    tests_timeout: float = 3600
    run_token: str = ".commitgate/cache/precommit.token"
    disabled_checks: set[str] = field(default_factory=set)
    source: Path | None = None

    @classmethod
    def load(
        cls,
        config_path: str | Path | None = None,
        project_root: str | Path | None = None,
    ) -> CommitGateConfig:
        """Load configuration from a YAML file, falling back to defaults.

        Search order:
        1. Explicit ``config_path`` argument
        2. ``.commitgate.yml`` in the project root
        3. Built-in defaults

        ``source`` is left as ``None`` when no file was found so that the
        caller can warn about it.
        """
        root = Path(project_root) if project_root else Path.cwd()
        raw: dict[str, Any] = copy.deepcopy(_DEFAULT_CONFIG)

        search_paths: list[Path] = []
        if config_path:
            search_paths.append(Path(config_path))
        search_paths.append(root / CONFIG_FILENAME)

        source = None
        for path in search_paths:
            if path.exists():
                try:
                    with open(path, encoding="utf-8") as f:
                        loaded = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ConfigError(f"Invalid configuration file {path}: {e}") from e
                if loaded is not None and not isinstance(loaded, dict):
                    raise ConfigError(f"Configuration file {path} must contain a mapping")
                if loaded:
                    raw = _deep_merge(raw, loaded)
                source = path
                break

        cfg = cls._from_raw(raw, root)
        cfg.source = source
        return cfg

    @classmethod
    def _from_raw(cls, raw: dict[str, Any], root: Path) -> CommitGateConfig:
        """Build config from a raw dict (merged defaults + user overrides)."""
        cfg = cls(project_root=root)

        files = raw.get("files") or {}
        dangerous = files.get("dangerous") or []
        cfg.dangerous_files = DangerousFileSpec(tuple(_str_list(dangerous, "files.dangerous")))

        cfg.companions = []
        for entry in raw.get("companions") or []:
            if not isinstance(entry, dict) or "manifest" not in entry or "lock" not in entry:
                raise ConfigError("Each companions entry needs 'manifest' and 'lock' keys")
            cfg.companions.append(CompanionPair(str(entry["manifest"]), str(entry["lock"])))

        lint = raw.get("lint") or {}
        cfg.lint_command = _command(lint.get("command", cfg.lint_command), "lint.command")
        cfg.lint_extensions = _str_list(
            lint.get("extensions", cfg.lint_extensions), "lint.extensions"
        )

        analysis = raw.get("analysis") or {}
        cfg.analysis_command = _command(
            analysis.get("command", cfg.analysis_command), "analysis.command"
        )
        cfg.analysis_pattern = str(analysis.get("pattern", cfg.analysis_pattern))
        try:
            re.compile(cfg.analysis_pattern)
        except re.error as e:
            raise ConfigError(f"analysis.pattern is not a valid regular expression: {e}") from e

        tests = raw.get("tests") or {}
        cfg.tests_command = _command(tests.get("command", cfg.tests_command), "tests.command")
        try:
            cfg.tests_timeout = float(tests.get("timeout", cfg.tests_timeout))
        except (TypeError, ValueError) as e:
            raise ConfigError("tests.timeout must be a number of seconds") from e

        cfg.run_token = str(raw.get("run_token", cfg.run_token))

        # Checks
        for name, settings in (raw.get("checks") or {}).items():
            if isinstance(settings, dict) and not settings.get("enabled", True):
                cfg.disabled_checks.add(name)

        return cfg

    @property
    def run_token_path(self) -> Path:
        path = Path(self.run_token)
        return path if path.is_absolute() else self.project_root / path

    def is_check_enabled(self, check_id: str) -> bool:
        """Check if a check is enabled in the config."""
        return check_id not in self.disabled_checks


def _str_list(value: Any, key: str) -> list[str]:
    """Coerce a string or list of strings, rejecting anything else."""
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"{key} must be a list of strings")
    return [str(v) for v in value]


def _command(value: Any, key: str) -> list[str]:
    """Commands may be written as an argv list or a single shell-style string."""
    if isinstance(value, str):
        return shlex.split(value)
    return _str_list(value, key)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep-merge override dict into base dict."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
