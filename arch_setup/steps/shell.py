from __future__ import annotations

import logging

from ..lib.command import run_cmd
from ..lib.files import append_to_file
from .context import SetupContext

logger = logging.getLogger(__name__)

ZSHRC_SNIPPET = """
# Theme
source /usr/share/zsh-theme-powerlevel10k/powerlevel10k.zsh-theme

# Plugins
source /usr/share/doc/pkgfile/command-not-found.zsh
source /usr/share/zsh/plugins/zsh-autosuggestions/zsh-autosuggestions.plugin.zsh
source /usr/share/zsh/plugins/zsh-syntax-highlighting/zsh-syntax-highlighting.plugin.zsh
"""


class ChangeDefaultShellStep:
    step_id = "change_default_shell"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Setting up Zsh with plugins")
        run_cmd(["chsh", "-s", "/usr/bin/zsh", ctx.user], sudo=True, dry_run=ctx.dry_run)

        logger.info("Installing Oh My Zsh")
        installer = ctx.work_path("install_ohmyzsh.sh")
        run_cmd(["curl", "-fsSL", "-o", str(installer), ctx.cfg.ohmyzsh_installer_url], dry_run=ctx.dry_run)
        run_cmd(["sh", str(installer), "--unattended"], capture=False, dry_run=ctx.dry_run)

        logger.info("Enabling pkgfile database update timer")
        r = run_cmd(
            ["systemctl", "enable", "--now", "pkgfile-update.timer"],
            sudo=True,
            check=False,
            dry_run=ctx.dry_run,
        )
        if not r.ok:
            logger.warning(
                "pkgfile-update timer could not be enabled, command-not-found may not work properly"
            )

        logger.info("Initializing pkgfile database")
        run_cmd(["pkgfile", "--update"], sudo=True, dry_run=ctx.dry_run)

        append_to_file("~/.zshrc", ZSHRC_SNIPPET, dry_run=ctx.dry_run)
        logger.info("Zsh setup complete")
        return True
