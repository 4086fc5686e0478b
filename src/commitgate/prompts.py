"""Confirmation providers used by checks that need a human decision."""

from __future__ import annotations

import re
import sys
from abc import ABC, abstractmethod
from typing import Callable

_YES = re.compile(r"^(y|j)", re.IGNORECASE)


class Confirmer(ABC):
    """Answers a yes/no question on behalf of the operator."""

    @abstractmethod
    def confirm(self, question: str) -> bool:
        ...  # pragma: no cover


class InteractiveConfirmer(Confirmer):
    """Ask on the terminal. An empty answer takes the default.

    When stdin is closed (for example when run from a git hook without a
    terminal) the default is used as well.
    """

    def __init__(self, default: bool = True, input_fn: Callable[[str], str] = input) -> None:
        self.default = default
        self._input = input_fn

    def confirm(self, question: str) -> bool:
        default_str = "Y/n" if self.default else "y/N"
        try:
            answer = self._input(f"{question} [{default_str}] ").strip()
        except EOFError:
            print(file=sys.stderr)
            return self.default
        if not answer:
            return self.default
        return bool(_YES.match(answer))


class AutoConfirmer(Confirmer):
    """Give the same answer to every question without asking."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.questions: list[str] = []

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        return self.answer
