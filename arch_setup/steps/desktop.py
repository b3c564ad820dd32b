from __future__ import annotations

import logging

from ..lib.command import run_cmd
from .context import SetupContext

logger = logging.getLogger(__name__)


class InstallKdeThemesStep:
    step_id = "install_kde_themes"
    critical = True

    def _install_from_git(self, ctx: SetupContext, repo: str, dirname: str, *args: str) -> None:
        target = ctx.work_path(dirname)
        run_cmd(["git", "clone", repo, str(target)], dry_run=ctx.dry_run)
        run_cmd(["./install.sh", *args], cwd=str(target), capture=False, dry_run=ctx.dry_run)

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Installing WhiteSur desktop themes")
        self._install_from_git(ctx, ctx.cfg.kde_theme_repo, "WhiteSur-kde", "-c", "dark")
        self._install_from_git(ctx, ctx.cfg.cursor_theme_repo, "WhiteSur-cursors")
        logger.info("Desktop themes installed")
        return True
