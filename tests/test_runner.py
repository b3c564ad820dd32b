"""Unit tests for the checkpointed step runner."""

from __future__ import annotations

import logging
from typing import Dict, List

import pytest

from arch_setup.progress_store import MemoryProgressStore
from arch_setup.runner import FatalStepError, RunResult, Step, StepRunner, display_name, run_steps


class RecordingStore(MemoryProgressStore):
    def __init__(self, marker=None) -> None:
        super().__init__(marker)
        self.saved: List[str] = []
        self.cleared = 0

    def save_marker(self, name: str) -> None:
        super().save_marker(name)
        self.saved.append(name)

    def clear_marker(self) -> None:
        super().clear_marker()
        self.cleared += 1


def make_steps(plan, calls: List[str]) -> List[Step]:
    """plan: list of (name, critical, outcome); outcome is a bool or an exception."""

    def action(name, outcome):
        def _run():
            calls.append(name)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        return _run

    return [Step(name=n, critical=c, action=action(n, o)) for n, c, o in plan]


NAMES = ["a", "b", "c", "d"]


def test_fresh_run_executes_everything_and_clears_marker() -> None:
    calls: List[str] = []
    store = RecordingStore()

    result = run_steps(steps=make_steps([(n, True, True) for n in NAMES], calls), store=store)

    assert calls == NAMES
    assert result == RunResult(ran_steps=NAMES, skipped_steps=[], failed_steps=[])
    assert store.saved == NAMES
    assert store.load_marker() is None
    assert store.cleared == 1


@pytest.mark.parametrize("marker_index", range(len(NAMES)))
def test_should_execute_is_false_through_marker(marker_index: int) -> None:
    store = MemoryProgressStore(NAMES[marker_index])
    runner = StepRunner(make_steps([(n, True, True) for n in NAMES], []), store)
    runner.load_progress()

    decisions = [runner.should_execute(n) for n in NAMES]

    assert decisions == [i > marker_index for i in range(len(NAMES))]


def test_should_execute_without_marker_runs_everything() -> None:
    runner = StepRunner(make_steps([(n, True, True) for n in NAMES], []), MemoryProgressStore())
    runner.load_progress()
    assert all(runner.should_execute(n) for n in NAMES)


def test_skip_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    runner = StepRunner(make_steps([(n, True, True) for n in NAMES], []), MemoryProgressStore("b"))
    runner.load_progress()
    with caplog.at_level(logging.INFO, logger="arch_setup.runner"):
        runner.should_execute("a")
    assert "Skipping already completed step: a" in caplog.text


def test_resume_runs_only_steps_after_marker() -> None:
    calls: List[str] = []
    store = RecordingStore("b")

    result = run_steps(steps=make_steps([(n, True, True) for n in NAMES], calls), store=store)

    assert calls == ["c", "d"]
    assert result.skipped_steps == ["a", "b"]
    assert result.ran_steps == ["c", "d"]
    assert store.load_marker() is None


def test_fatal_failure_keeps_marker_at_previous_step() -> None:
    calls: List[str] = []
    store = RecordingStore()
    steps = make_steps([("a", True, True), ("b", True, True), ("c", True, False), ("d", True, True)], calls)

    with pytest.raises(FatalStepError) as excinfo:
        run_steps(steps=steps, store=store)

    assert excinfo.value.step_name == "c"
    assert calls == ["a", "b", "c"]
    assert store.load_marker() == "b"
    assert store.cleared == 0


def test_fatal_failure_on_first_step_leaves_no_marker() -> None:
    store = RecordingStore()
    with pytest.raises(FatalStepError):
        run_steps(steps=make_steps([("a", True, False), ("b", True, True)], []), store=store)
    assert store.load_marker() is None
    assert store.saved == []


def test_advisory_failure_advances_marker_and_continues(caplog: pytest.LogCaptureFixture) -> None:
    calls: List[str] = []
    store = RecordingStore()
    steps = make_steps([("a", True, True), ("b", False, False), ("c", True, True)], calls)

    with caplog.at_level(logging.WARNING, logger="arch_setup.runner"):
        result = run_steps(steps=steps, store=store)

    assert calls == ["a", "b", "c"]
    assert store.saved == ["a", "b", "c"]
    assert result.failed_steps == ["b"]
    assert "B failed, but continuing with setup" in caplog.text


def test_exception_in_action_counts_as_failure() -> None:
    store = RecordingStore()
    steps = make_steps([("a", True, True), ("b", True, RuntimeError("boom"))], [])

    with pytest.raises(FatalStepError) as excinfo:
        run_steps(steps=steps, store=store)

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert store.load_marker() == "a"


def test_advisory_exception_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    steps = make_steps([("a", False, OSError("no device")), ("b", True, True)], [])
    with caplog.at_level(logging.ERROR, logger="arch_setup.runner"):
        result = run_steps(steps=steps, store=RecordingStore())
    assert result.failed_steps == ["a"]
    assert "Step a raised an error" in caplog.text


def test_example_sequence_resumes_at_failed_fatal_step() -> None:
    calls: List[str] = []
    store = RecordingStore()
    outcomes: Dict[str, bool] = {"A": True, "B": False, "C": False}

    def steps():
        def action(name):
            def _run():
                calls.append(name)
                return outcomes[name]

            return _run

        return [
            Step("A", True, action("A")),
            Step("B", False, action("B")),
            Step("C", True, action("C")),
        ]

    with pytest.raises(FatalStepError):
        run_steps(steps=steps(), store=store)
    assert calls == ["A", "B", "C"]
    assert store.load_marker() == "B"

    calls.clear()
    outcomes["C"] = True
    result = run_steps(steps=steps(), store=store)

    assert calls == ["C"]
    assert result.skipped_steps == ["A", "B"]
    assert store.load_marker() is None


def test_rerun_after_completion_starts_over() -> None:
    calls: List[str] = []
    store = RecordingStore()
    plan = [(n, True, True) for n in NAMES]

    run_steps(steps=make_steps(plan, calls), store=store)
    run_steps(steps=make_steps(plan, calls), store=store)

    assert calls == NAMES + NAMES


def test_unknown_marker_restarts_from_beginning(caplog: pytest.LogCaptureFixture) -> None:
    calls: List[str] = []
    with caplog.at_level(logging.WARNING, logger="arch_setup.runner"):
        run_steps(steps=make_steps([(n, True, True) for n in NAMES], calls), store=RecordingStore("gone"))
    assert calls == NAMES
    assert "unknown step 'gone'" in caplog.text


def test_duplicate_step_names_are_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate step name: a"):
        StepRunner(make_steps([("a", True, True), ("a", False, True)], []), MemoryProgressStore())


def test_should_execute_rejects_unknown_step() -> None:
    runner = StepRunner(make_steps([("a", True, True)], []), MemoryProgressStore())
    with pytest.raises(ValueError):
        runner.should_execute("nope")


def test_execute_step_skips_before_resume_point() -> None:
    calls: List[str] = []
    steps = make_steps([("a", True, False), ("b", True, True)], calls)
    runner = StepRunner(steps, MemoryProgressStore("a"))
    runner.load_progress()

    assert runner.execute_step(steps[0]) is True
    assert calls == []
    assert runner.execute_step(steps[1]) is True
    assert calls == ["b"]
    assert runner.last_completed == "b"


def test_display_name() -> None:
    assert display_name("setup_wine") == "Setup wine"
    assert display_name("connect_wifi") == "Connect wifi"
    assert display_name("cleanup") == "Cleanup"
