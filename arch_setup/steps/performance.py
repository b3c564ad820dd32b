from __future__ import annotations

import logging

from ..lib.command import run_cmd
from ..lib.files import add_user_to_group
from ..lib.pacman import pacman_install
from ..lib.systemd import enable_service
from .context import SetupContext

logger = logging.getLogger(__name__)


class SetupTunedStep:
    step_id = "setup_tuned"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Setting up system performance tuning")
        enable_service("tuned", dry_run=ctx.dry_run)
        enable_service("tuned-ppd", dry_run=ctx.dry_run)
        run_cmd(["tuned-adm", "profile", ctx.cfg.tuned_profile], sudo=True, dry_run=ctx.dry_run)
        logger.info("Performance tuning enabled with %s profile", ctx.cfg.tuned_profile)
        return True


class SetupWineStep:
    step_id = "setup_wine"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Installing Wine for Windows compatibility")
        pacman_install(ctx.cfg.wine_packages, dry_run=ctx.dry_run)
        pacman_install(ctx.cfg.wine_dependencies, asdeps=True, dry_run=ctx.dry_run)
        logger.info("Wine setup complete")
        return True


class SetupGamemodeStep:
    step_id = "setup_gamemode"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Setting up GameMode")
        enable_service("gamemoded", user=True, dry_run=ctx.dry_run)
        add_user_to_group(ctx.user, "gamemode", dry_run=ctx.dry_run)
        logger.info("GameMode setup complete")
        return True
