"""Test configuration and fixtures."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Sequence

import pytest

from arch_setup.setup_config import SetupConfig
from arch_setup.steps.context import SetupContext


class ScriptedPrompter:
    """Answers prompts from prepared lists instead of the terminal."""

    def __init__(self, answers=(), confirms=(), choices=()) -> None:
        self.answers = list(answers)
        self.confirms = list(confirms)
        self.choices = list(choices)
        self.shown: List[str] = []
        self.questions: List[str] = []

    def show(self, text: str) -> None:
        self.shown.append(text)

    def ask(self, question: str, *, default: str = "", password: bool = False) -> str:
        self.questions.append(question)
        return self.answers.pop(0) if self.answers else default

    def confirm(self, question: str, *, default: bool = False) -> bool:
        self.questions.append(question)
        return self.confirms.pop(0) if self.confirms else default

    def choose(self, question: str, options: Sequence[str]) -> str:
        self.questions.append(question)
        return self.choices.pop(0) if self.choices else options[0]


class FakeCommands:
    """Stands in for subprocess.run; records argv and returns canned results.

    Responses are matched by argv prefix, ignoring a leading ``sudo``. The
    most recently registered matching response wins.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.inputs: List[str | None] = []
        self.responses: List[tuple] = []

    def respond(self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.responses.append((list(prefix), returncode, stdout, stderr))

    @staticmethod
    def _core(argv: Sequence[str]) -> List[str]:
        argv = list(argv)
        return argv[1:] if argv and argv[0] == "sudo" else argv

    def __call__(self, argv, **kwargs):
        self.calls.append(list(argv))
        self.inputs.append(kwargs.get("input"))
        core = self._core(argv)
        for prefix, rc, out, err in reversed(self.responses):
            if core[: len(prefix)] == prefix:
                return subprocess.CompletedProcess(argv, rc, out, err)
        return subprocess.CompletedProcess(argv, 0, "", "")

    def ran(self, *prefix: str) -> bool:
        return any(self._core(c)[: len(prefix)] == list(prefix) for c in self.calls)

    def count(self, *prefix: str) -> int:
        return sum(1 for c in self.calls if self._core(c)[: len(prefix)] == list(prefix))


@pytest.fixture
def fake_commands(monkeypatch: pytest.MonkeyPatch) -> FakeCommands:
    fake = FakeCommands()
    monkeypatch.setattr("arch_setup.lib.command.subprocess.run", fake)
    return fake


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def boot_entries(tmp_path: Path) -> Path:
    entries = tmp_path / "entries"
    entries.mkdir()
    return entries


@pytest.fixture
def setup_config(boot_entries: Path) -> SetupConfig:
    return SetupConfig(
        raw={
            "paths": {"boot_entries_dir": str(boot_entries)},
            "timing": {"wifi_scan_wait_s": 0, "wifi_powersave_wait_s": 0, "bluetooth_scan_s": 1},
        }
    )


@pytest.fixture
def ctx(tmp_path: Path, setup_config: SetupConfig, prompter: ScriptedPrompter) -> SetupContext:
    work = tmp_path / "work"
    work.mkdir()
    return SetupContext(cfg=setup_config, prompter=prompter, work_dir=str(work), user="tester")


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo configure_logging() so each test starts with a clean root logger."""
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    for attr in ("_arch_setup_configured", "_arch_setup_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)
