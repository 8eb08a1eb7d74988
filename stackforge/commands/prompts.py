"""Interactive prompts built on ``rich.prompt``.

Commands never call ``rich.prompt`` directly; they go through an
:class:`Asker` so tests can substitute scripted answers.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from rich.prompt import Confirm, Prompt

from stackforge.utils import console, print_error

Validator = Callable[[str], "str | None"]


class Asker(Protocol):
    def text(self, message: str, default: str = "", validate: Validator | None = None) -> str: ...

    def choice(self, message: str, choices: Sequence[str], default: str | None = None) -> str: ...

    def confirm(self, message: str, default: bool = False) -> bool: ...


class RichAsker:
    """Terminal prompts; invalid answers are reported and asked again."""

    def text(self, message: str, default: str = "", validate: Validator | None = None) -> str:
        while True:
            answer = Prompt.ask(message, default=default, console=console).strip()
            error = validate(answer) if validate else None
            if error is None:
                return answer
            print_error(error)

    def choice(self, message: str, choices: Sequence[str], default: str | None = None) -> str:
        return Prompt.ask(message, choices=list(choices), default=default, console=console)

    def confirm(self, message: str, default: bool = False) -> bool:
        return Confirm.ask(message, default=default, console=console)
