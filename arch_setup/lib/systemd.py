from __future__ import annotations

import logging
from typing import Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


def enable_service(unit: str, *, now: bool = True, user: bool = False, dry_run: bool = False) -> None:
    argv = ["systemctl"]
    if user:
        argv.append("--user")
    argv.append("enable")
    if now:
        argv.append("--now")
    # User units are managed without elevation.
    run_cmd([*argv, unit], sudo=not user, dry_run=dry_run)
    logger.info("Enabled %s%s", unit, " (started)" if now else "")


def enable_units(units: Sequence[str], *, dry_run: bool = False) -> None:
    if not units:
        return
    run_cmd(["systemctl", "enable", *units], sudo=True, dry_run=dry_run)


def restart_service(unit: str, *, dry_run: bool = False) -> None:
    run_cmd(["systemctl", "restart", unit], sudo=True, dry_run=dry_run)
