from __future__ import annotations

import logging
from pathlib import Path

from ..lib.command import run_cmd
from ..lib.files import sed_in_place
from .context import SetupContext

logger = logging.getLogger(__name__)

MKINITCPIO_CONF = "/etc/mkinitcpio.conf"

# (glob, new name); "*linux.conf" never matches "*linux-fallback.conf".
ENTRY_RENAMES = [
    ("*linux.conf", "arch.conf"),
    ("*linux-fallback.conf", "arch-fallback.conf"),
]


class RenameBootloaderEntriesStep:
    step_id = "rename_bootloader_entries"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Renaming boot entries")
        entries = Path(ctx.cfg.boot_entries_dir)
        success = True

        for pattern, new_name in ENTRY_RENAMES:
            for entry in sorted(entries.glob(pattern)):
                target = entries / new_name
                logger.info("Renaming: %s -> %s", str(entry), str(target))
                r = run_cmd(["mv", str(entry), str(target)], sudo=True, check=False, dry_run=ctx.dry_run)
                if not r.ok:
                    logger.error("Failed to rename %s to %s", str(entry), str(target))
                    success = False

        if success:
            logger.info("Boot entries renamed successfully")
        else:
            logger.error("Some boot entries couldn't be renamed")
        return success


class ConfigureSystemdBootStep:
    step_id = "configure_systemd_boot"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Adding NVIDIA boot parameters")
        entries = Path(ctx.cfg.boot_entries_dir)
        sed_in_place(
            str(entries / "arch.conf"),
            [
                "/^options/ s/$/ nvidia-drm.modeset=1 nvidia-drm.fbdev=1/",
                "/^# Created by:/d",
                "/^# Created on:/d",
                "/^title/ s/ (linux)//",
            ],
            dry_run=ctx.dry_run,
        )
        sed_in_place(
            str(entries / "arch-fallback.conf"),
            [
                "/^# Created by:/d",
                "/^# Created on:/d",
                "/^title/ s/(linux-fallback)/(fallback)/",
            ],
            dry_run=ctx.dry_run,
        )
        logger.info("NVIDIA boot parameters added")
        return True


class ConfigureNvidiaModulesStep:
    step_id = "configure_nvidia_modules"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Configuring early NVIDIA module loading")
        sed_in_place(
            MKINITCPIO_CONF,
            [
                r"/^MODULES=/ s/\(btrfs\)/\1 nvidia nvidia_modeset nvidia_uvm nvidia_drm/",
                r"/^HOOKS=/ s/\<kms\>[[:space:]]*//",
            ],
            dry_run=ctx.dry_run,
        )
        run_cmd(["mkinitcpio", "-P"], sudo=True, capture=False, dry_run=ctx.dry_run)
        logger.info("NVIDIA modules configured and initramfs rebuilt")
        return True
