"""Interactive input for steps that need the user (network choice, pairing, reboot).

Steps only talk to the ``Prompter`` protocol, so a run can be driven by the
terminal or by scripted answers.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt


class Prompter(Protocol):
    def show(self, text: str) -> None:
        ...

    def ask(self, question: str, *, default: str = "", password: bool = False) -> str:
        ...

    def confirm(self, question: str, *, default: bool = False) -> bool:
        ...

    def choose(self, question: str, options: Sequence[str]) -> str:
        ...


class ConsolePrompter:
    """Terminal prompts rendered with rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def show(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False)

    def ask(self, question: str, *, default: str = "", password: bool = False) -> str:
        answer = Prompt.ask(
            question,
            console=self.console,
            default=default,
            password=password,
            show_default=bool(default) and not password,
        )
        return (answer or "").strip()

    def confirm(self, question: str, *, default: bool = False) -> bool:
        return Confirm.ask(question, console=self.console, default=default)

    def choose(self, question: str, options: Sequence[str]) -> str:
        if not options:
            raise ValueError("choose() needs at least one option")
        for i, option in enumerate(options, start=1):
            self.console.print(f"[{i}] {option}", markup=False, highlight=False)
        numbers = [str(i) for i in range(1, len(options) + 1)]
        picked = Prompt.ask(question, console=self.console, choices=numbers, default="1")
        return options[int(picked) - 1]
