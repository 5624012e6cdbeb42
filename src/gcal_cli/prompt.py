"""Line-oriented prompting.

Every interactive step reads exactly one line through a `Prompt` callable:
it receives the label (e.g. ``"Title: "``) and returns the trimmed answer.
`console_prompt` talks to the terminal; `ScriptedPrompt` replays fixed
answers for non-interactive use and tests.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from gcal_cli.exceptions import GcalCliError

Prompt = Callable[[str], str]


class InputClosedError(GcalCliError):
    """Raised when input ends before a prompt is answered."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"failed to read input for {label.strip().rstrip(':')!r}: end of input")


def console_prompt(label: str) -> str:
    """Print the label and read one trimmed line from stdin."""
    try:
        return input(label).strip()
    except EOFError as e:
        raise InputClosedError(label) from e


class ScriptedPrompt:
    """Answers prompts from a fixed list of lines.

    The labels that were asked are kept in `asked`, in order.
    """

    def __init__(self, answers: Iterable[str]):
        self._answers = list(answers)
        self.asked: list[str] = []

    def __call__(self, label: str) -> str:
        self.asked.append(label)
        if not self._answers:
            raise InputClosedError(label)
        return self._answers.pop(0).strip()

    @property
    def remaining(self) -> int:
        return len(self._answers)
