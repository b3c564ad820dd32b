from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..prompts import Prompter
from ..setup_config import SetupConfig


@dataclass(frozen=True)
class SetupContext:
    cfg: SetupConfig
    prompter: Prompter
    work_dir: str
    user: str
    dry_run: bool = False

    def work_path(self, name: str) -> Path:
        return Path(self.work_dir) / name
