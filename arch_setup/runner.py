from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from .progress_store import ProgressStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """A named unit of setup work.

    ``action`` takes no arguments and returns True on success. Returning
    False or raising counts as a failure. A critical step aborts the run when
    it fails; an advisory one only logs a warning.
    """

    name: str
    critical: bool
    action: Callable[[], bool] = field(compare=False)


@dataclass(frozen=True)
class RunResult:
    ran_steps: List[str]
    skipped_steps: List[str]
    failed_steps: List[str]


class FatalStepError(RuntimeError):
    """A critical step failed; the run stops and the step stays unmarked."""

    def __init__(self, step_name: str) -> None:
        self.step_name = step_name
        super().__init__(f"Critical step failed: {step_name}")


def display_name(step_name: str) -> str:
    """``setup_wine`` -> ``Setup wine``."""
    text = step_name.replace("_", " ")
    return text[:1].upper() + text[1:]


class StepRunner:
    """Runs an ordered list of steps, resuming after the persisted marker."""

    def __init__(self, steps: Sequence[Step], store: ProgressStore) -> None:
        self.steps = list(steps)
        self.store = store

        self._index: Dict[str, int] = {}
        for i, step in enumerate(self.steps):
            if step.name in self._index:
                raise ValueError(f"Duplicate step name: {step.name}")
            self._index[step.name] = i

        # None means "start": nothing has completed yet.
        self.last_completed: Optional[str] = None
        self.current_step: Optional[str] = None

    def load_progress(self) -> Optional[str]:
        marker = self.store.load_marker()
        if marker is None:
            logger.info("No saved progress found. Starting from the beginning.")
        elif marker not in self._index:
            logger.warning(
                "Saved progress refers to unknown step %r; the step list changed. "
                "Starting from the beginning.",
                marker,
            )
            marker = None
        else:
            logger.info("Found saved progress. Resuming from step: %s", marker)
        self.last_completed = marker
        return marker

    def should_execute(self, name: str) -> bool:
        if name not in self._index:
            raise ValueError(f"Unknown step: {name}")
        if self.last_completed is None:
            return True
        if self._index[name] > self._index[self.last_completed]:
            return True
        logger.info("Skipping already completed step: %s", name)
        return False

    def execute_step(self, step: Step) -> bool:
        """Run one step if it lies past the resume point.

        Returns False only for an advisory step that failed. A failing
        critical step raises FatalStepError.
        """

        if not self.should_execute(step.name):
            return True
        return self._execute(step)

    def run(self) -> RunResult:
        self.load_progress()

        ran: List[str] = []
        skipped: List[str] = []
        failed: List[str] = []

        for step in self.steps:
            if not self.should_execute(step.name):
                skipped.append(step.name)
                continue
            ran.append(step.name)
            if not self._execute(step):
                failed.append(step.name)

        self.current_step = None
        self.store.clear_marker()
        self.last_completed = None
        return RunResult(ran_steps=ran, skipped_steps=skipped, failed_steps=failed)

    def _execute(self, step: Step) -> bool:
        self.current_step = step.name
        title = display_name(step.name)
        logger.info("Executing step: %s", title)

        error: Optional[BaseException] = None
        try:
            ok = bool(step.action())
        except Exception as e:
            logger.exception("Step %s raised an error", step.name)
            error = e
            ok = False

        if ok:
            self._mark_completed(step.name)
            return True

        if step.critical:
            logger.error("Failed to execute %s. Exiting...", title)
            raise FatalStepError(step.name) from error

        logger.warning("Warning: %s failed, but continuing with setup", title)
        # Advisory failures advance the marker: a rerun does not retry them.
        self._mark_completed(step.name)
        return False

    def _mark_completed(self, name: str) -> None:
        self.last_completed = name
        self.store.save_marker(name)


def run_steps(*, steps: Sequence[Step], store: ProgressStore) -> RunResult:
    """Run steps in order with resume semantics."""

    return StepRunner(steps, store).run()
