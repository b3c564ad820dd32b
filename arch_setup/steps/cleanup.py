from __future__ import annotations

import logging

from ..lib.command import CommandError, run_cmd
from ..lib.pacman import list_orphans, remove_packages
from .context import SetupContext

logger = logging.getLogger(__name__)


class CleanupStep:
    step_id = "cleanup"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Running final cleanup tasks")

        r = run_cmd(["yay", "-Syu", "--noconfirm"], check=False, capture=False, dry_run=ctx.dry_run)
        if r.ok:
            logger.info("System fully updated")
        else:
            logger.warning("System update encountered issues, continuing with cleanup")

        logger.info("Checking for orphaned packages")
        orphans = list_orphans(dry_run=ctx.dry_run)
        if orphans:
            logger.info("Removing orphaned packages: %s", " ".join(orphans))
            try:
                remove_packages(orphans, dry_run=ctx.dry_run)
                logger.info("Orphaned packages removed")
            except CommandError as e:
                logger.warning("Failed to remove some orphaned packages: %s", e)
        else:
            logger.info("No orphaned packages found")

        logger.info("System cleanup complete")
        return True
