"""commitgate — a pre-commit quality gate."""

__version__ = "0.1.0"
