"""
Interaction port — how the installer talks to the user.

The workflow decides WHAT to ask and in which order; an Interaction
decides HOW. The terminal implementation lives in the CLI layer. The
scripted one here drives the workflow from canned answers, for tests
and unattended runs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Literal

Style = Literal["plain", "heading", "success", "warning", "error", "detail"]


def user_confirmed(line: str) -> bool:
    """Return whether a typed answer counts as "yes".

    Only a lone ``y`` qualifies, after trimming and lowercasing. So
    ``"Y"`` and ``"y \\n"`` are yes; ``"yes"``, ``"n"`` and ``""`` are no.
    """
    return line.strip().lower() == "y"


def parse_selection(text: str, count: int) -> list[int]:
    """Parse a multi-select answer into 0-based indices.

    Accepts 1-based numbers separated by spaces and/or commas. Indices
    keep the order they were typed in; repeats are dropped. Raises
    ValueError on anything that is not a number in ``1..count``.
    """
    chosen: list[int] = []
    for token in text.replace(",", " ").split():
        if not token.isdigit():
            raise ValueError(f"'{token}' is not a number")
        number = int(token)
        if not 1 <= number <= count:
            raise ValueError(f"{number} is not between 1 and {count}")
        if number - 1 not in chosen:
            chosen.append(number - 1)
    return chosen


class Interaction(ABC):
    """Abstract user interaction."""

    @abstractmethod
    def confirm(self, question: str) -> bool:
        """Ask a yes/no question; only an exact ``y`` is a yes."""

    @abstractmethod
    def choose(self, prompt: str, items: Sequence[str]) -> list[int]:
        """Let the user pick any subset of ``items``.

        Returns 0-based indices in the order the user picked them.
        """

    @abstractmethod
    def notify(self, message: str, style: Style = "plain") -> None:
        """Show a status line."""


class ScriptedInteraction(Interaction):
    """Interaction that replays pre-recorded answers.

    ``answers`` are raw typed lines, fed through the same
    ``user_confirmed`` policy as real input. ``selections`` are raw
    multi-select lines. Running out of answers reads as an empty line,
    the same as EOF on a terminal.
    """

    def __init__(
        self,
        answers: Iterable[str] = (),
        selections: Iterable[str] = (),
    ):
        self._answers = list(answers)
        self._selections = list(selections)
        self.questions: list[str] = []
        self.prompts: list[tuple[str, list[str]]] = []
        self.messages: list[tuple[str, Style]] = []

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        line = self._answers.pop(0) if self._answers else ""
        return user_confirmed(line)

    def choose(self, prompt: str, items: Sequence[str]) -> list[int]:
        self.prompts.append((prompt, list(items)))
        line = self._selections.pop(0) if self._selections else ""
        return parse_selection(line, len(items))

    def notify(self, message: str, style: Style = "plain") -> None:
        self.messages.append((message, style))

    @property
    def output(self) -> str:
        """Everything shown to the user, one message per line."""
        return "\n".join(message for message, _ in self.messages)
