from __future__ import annotations

import getpass
import os
from dataclasses import dataclass, field
from pathlib import Path


def _home(rel: str) -> str:
    return str(Path.home() / rel)


@dataclass(frozen=True)
class Paths:
    progress_default: str = field(default_factory=lambda: _home(".arch_setup_progress"))
    log_default: str = field(default_factory=lambda: _home(".arch_setup.log"))


def current_user() -> str:
    return os.environ.get("USER") or getpass.getuser()


PATHS = Paths()
