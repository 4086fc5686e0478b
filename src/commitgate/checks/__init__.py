"""Pre-commit check units for commitgate, in pipeline order."""

from commitgate.checks.base import BaseCheck, CheckContext
from commitgate.checks.companion_files import CompanionFilesCheck
from commitgate.checks.dangerous_files import DangerousFilesCheck
from commitgate.checks.static_analysis import StaticAnalysisCheck
from commitgate.checks.syntax import SyntaxCheck
from commitgate.checks.test_suite import TestSuiteCheck

ALL_CHECKS = [
    DangerousFilesCheck,
    CompanionFilesCheck,
    SyntaxCheck,
    StaticAnalysisCheck,
    TestSuiteCheck,
]

__all__ = [
    "BaseCheck",
    "CheckContext",
    "DangerousFilesCheck",
    "CompanionFilesCheck",
    "SyntaxCheck",
    "StaticAnalysisCheck",
    "TestSuiteCheck",
    "ALL_CHECKS",
]
