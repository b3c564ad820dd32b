from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class ProgressStore(Protocol):
    """Persistence port for the resume marker."""

    def load_marker(self) -> Optional[str]:
        ...

    def save_marker(self, name: str) -> None:
        ...

    def clear_marker(self) -> None:
        ...


class FileProgressStore:
    """Keeps the marker as a single line in a per-user file.

    A missing or blank file means no progress has been recorded yet.
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path).expanduser()

    def load_marker(self) -> Optional[str]:
        if not self.path.exists():
            return None
        lines = self.path.read_text(encoding="utf-8").splitlines()
        marker = lines[0].strip() if lines else ""
        return marker or None

    def save_marker(self, name: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(name + "\n", encoding="utf-8")
        logger.info("Progress saved. To resume from this point, run the script again.")

    def clear_marker(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info("Cleared progress marker %s", str(self.path))


class MemoryProgressStore:
    """In-process marker; used for dry runs so the real resume point never moves."""

    def __init__(self, marker: Optional[str] = None) -> None:
        self.marker = marker

    def load_marker(self) -> Optional[str]:
        return self.marker

    def save_marker(self, name: str) -> None:
        self.marker = name

    def clear_marker(self) -> None:
        self.marker = None
