from __future__ import annotations

import logging

from ..lib.pacman import pacman_install, yay_install
from ..lib.systemd import enable_service
from .context import SetupContext

logger = logging.getLogger(__name__)


class SetupDnieStep:
    """Spanish national ID card (DNIe) reader support."""

    step_id = "setup_dnie"
    critical = False

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Setting up DNIe (Spanish National ID card) support")
        pacman_install(ctx.cfg.dnie_packages, dry_run=ctx.dry_run)
        yay_install(ctx.cfg.dnie_aur_packages, dry_run=ctx.dry_run)
        enable_service("pcscd.service", dry_run=ctx.dry_run)
        logger.info("DNIe support setup complete")
        logger.info("You can now use your DNIe with compatible applications - remember to set up your browser")
        return True
