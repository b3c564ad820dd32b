from __future__ import annotations

import argparse
import logging
import tempfile
from typing import Optional, Sequence

from .lib.command import run_cmd
from .lib.env import current_user
from .logging_utils import configure_logging
from .progress_store import FileProgressStore, MemoryProgressStore, ProgressStore
from .prompts import ConsolePrompter, Prompter
from .runner import FatalStepError, RunResult, display_name, run_steps
from .setup_config import load_setup_config
from .steps import SETUP_STEPS, SetupContext, build_sequence

logger = logging.getLogger(__name__)


def run(
    *,
    config_path: Optional[str] = None,
    progress_path: Optional[str] = None,
    log_path: Optional[str] = None,
    dry_run: bool = False,
    prompter: Optional[Prompter] = None,
    steps: Optional[Sequence] = None,
) -> RunResult:
    """Run the setup sequence, persisting the resume marker between runs."""

    cfg = load_setup_config(config_path)
    actual_log_path = configure_logging(log_path=log_path or cfg.log_file)
    logger.info("Starting Arch Linux post-installation setup")

    store: ProgressStore
    if dry_run:
        logger.info("Dry run: commands are logged, not executed; progress is not persisted")
        store = MemoryProgressStore()
    else:
        store = FileProgressStore(progress_path or cfg.progress_file)

    with tempfile.TemporaryDirectory(prefix="arch_setup.") as work_dir:
        ctx = SetupContext(
            cfg=cfg,
            prompter=prompter or ConsolePrompter(),
            work_dir=work_dir,
            user=current_user(),
            dry_run=dry_run,
        )
        try:
            result = run_steps(steps=build_sequence(ctx, steps), store=store)
        except FatalStepError as e:
            logger.error(
                "Setup stopped at %s. See %s, fix the problem and run again to resume from there.",
                e.step_name,
                actual_log_path,
            )
            raise

    logger.info("Full log written to %s", actual_log_path)
    return result


def offer_reboot(prompter: Prompter, *, dry_run: bool = False) -> bool:
    logger.info("Setup complete!")
    logger.info("A reboot is required to apply all changes")

    answer = prompter.ask("Would you like to reboot now? (y/n)")
    if answer.strip().lower() in {"y", "yes"}:
        logger.info("Rebooting system now...")
        run_cmd(["reboot"], sudo=True, dry_run=dry_run)
        return True

    logger.info("Please remember to reboot your system later to apply all changes")
    return False


def main(
    argv: Optional[list[str]] = None,
    *,
    prompter: Optional[Prompter] = None,
    steps: Optional[Sequence] = None,
) -> int:
    p = argparse.ArgumentParser(prog="arch-setup", description="Arch Linux post-installation setup")
    p.add_argument("--config", default=None, help="YAML file overriding package lists and paths")
    p.add_argument("--progress-file", default=None, help="Resume marker file (default ~/.arch_setup_progress)")
    p.add_argument("--log", default=None, help="Log file (default ~/.arch_setup.log)")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--list-steps", action="store_true", help="Print the step sequence and exit")
    p.add_argument("--no-reboot", action="store_true", help="Do not offer to reboot at the end")

    args = p.parse_args(argv)

    if args.list_steps:
        for i, s in enumerate(SETUP_STEPS if steps is None else steps, start=1):
            kind = "fatal" if s.critical else "advisory"
            print(f"{i:2d}. {s.step_id:<28} {kind:<9} {display_name(s.step_id)}")
        return 0

    prompter = prompter or ConsolePrompter()
    try:
        result = run(
            config_path=args.config,
            progress_path=args.progress_file,
            log_path=args.log,
            dry_run=bool(args.dry_run),
            prompter=prompter,
            steps=steps,
        )
    except FatalStepError:
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted; run again to resume from the last completed step")
        return 130

    if result.failed_steps:
        logger.warning(
            "Finished with advisory failures: %s",
            ", ".join(display_name(n) for n in result.failed_steps),
        )

    if not args.no_reboot:
        offer_reboot(prompter, dry_run=bool(args.dry_run))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
