from __future__ import annotations

import logging

from ..lib.command import run_cmd
from ..lib.files import sed_in_place, write_root_file
from ..lib.pacman import pacman_install, pacman_sync, yay_install
from .context import SetupContext

logger = logging.getLogger(__name__)

PACMAN_CONF = "/etc/pacman.conf"
MIRRORLIST = "/etc/pacman.d/mirrorlist"
HOOKS_DIR = "/etc/pacman.d/hooks"

ORPHANS_HOOK = """[Trigger]
Operation=Remove
Operation=Install
Operation=Upgrade
Type=Package
Target=*

[Action]
Description=Log Orphan Packages
When=PostTransaction
Exec=/bin/bash -c 'pkgs="$(pacman -Qtdq)"; if [[ ! -z "$pkgs" ]]; then echo -e "The following packages are installed but not required (anymore):\\n$pkgs\\nYou can mark them as explicitly installed with '\\''pacman -D --asexplicit <pkg>'\\'' or remove them all using '\\''pacman -Qtdq | pacman -Rns -'\\''"; fi'
"""

CACHE_HOOK = """[Trigger]
Operation=Remove
Operation=Install
Operation=Upgrade
Type=Package
Target=*

[Action]
Description=Keep the last cache and the currently installed.
When=PostTransaction
Exec=/usr/bin/paccache -rvk2
"""


class ConfigurePacmanStep:
    step_id = "configure_pacman"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Optimizing pacman settings")
        sed_in_place(
            PACMAN_CONF,
            [
                r"/^\s*#\s*\[multilib\]/,/^\s*#Include/s/^#//",
                "s/^#VerbosePkgLists/VerbosePkgLists/",
                "s/^ParallelDownloads = 5/ParallelDownloads = 10/",
            ],
            dry_run=ctx.dry_run,
        )
        logger.info("Syncing package databases")
        pacman_sync(dry_run=ctx.dry_run)
        return True


class SetupReflectorStep:
    step_id = "setup_reflector"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Setting up mirror optimization")
        pacman_install(["reflector", "rsync"], dry_run=ctx.dry_run)

        r = run_cmd(["systemctl", "enable", "reflector.timer"], sudo=True, check=False, dry_run=ctx.dry_run)
        if not r.ok:
            logger.warning("Failed to enable reflector timer")
        run_cmd(["cp", MIRRORLIST, MIRRORLIST + ".backup"], sudo=True, check=False, dry_run=ctx.dry_run)

        logger.info("Updating mirror list")
        refreshed = run_cmd(
            ["reflector", "--protocol", "https", "--latest", "10", "--sort", "rate", "--save", MIRRORLIST],
            sudo=True,
            check=False,
            dry_run=ctx.dry_run,
        )
        if not refreshed.ok:
            logger.warning("Failed to update mirror list, continuing with existing mirrors")
            return True

        synced = run_cmd(["pacman", "-Syy"], sudo=True, check=False, dry_run=ctx.dry_run)
        usable = synced.ok and run_cmd(["pacman", "-Ss", "base-devel"], check=False, dry_run=ctx.dry_run).ok
        if usable:
            run_cmd(["pacman", "-Su", "--noconfirm"], sudo=True, check=False, capture=False, dry_run=ctx.dry_run)
            logger.info("Mirror optimization complete")
            return True

        logger.warning("Database issue - restoring backup mirrors")
        restored = run_cmd(["cp", MIRRORLIST + ".backup", MIRRORLIST], sudo=True, check=False, dry_run=ctx.dry_run)
        if restored.ok and run_cmd(["pacman", "-Syy"], sudo=True, check=False, dry_run=ctx.dry_run).ok:
            logger.info("Continuing with original mirrors")
        return True


class InstallPacmanPackagesStep:
    step_id = "install_pacman_packages"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Installing essential system packages")
        pacman_install(ctx.cfg.pacman_packages, sync_upgrade=True, dry_run=ctx.dry_run)
        logger.info("Core system packages installed successfully")
        return True


class InstallYayStep:
    step_id = "install_yay"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Installing yay (AUR helper)")
        yay_dir = ctx.work_path("yay-bin")
        run_cmd(["git", "clone", ctx.cfg.yay_repo, str(yay_dir)], dry_run=ctx.dry_run)
        run_cmd(["makepkg", "-si", "--noconfirm"], cwd=str(yay_dir), capture=False, dry_run=ctx.dry_run)
        logger.info("AUR helper installed successfully")
        return True


class InstallYayPackagesStep:
    step_id = "install_yay_packages"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Installing community packages from AUR")
        yay_install(ctx.cfg.aur_packages, dry_run=ctx.dry_run)
        logger.info("AUR packages installed successfully")
        return True


class SetupFlatpakStep:
    step_id = "setup_flatpak"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Adding Flatpak repositories")
        run_cmd(
            [
                "flatpak",
                "remote-add",
                "--user",
                "--if-not-exists",
                "flathub",
                "https://flathub.org/repo/flathub.flatpakrepo",
            ],
            dry_run=ctx.dry_run,
        )
        logger.info("Flatpak repository configured")
        return True


class SetupPacmanHooksStep:
    step_id = "setup_pacman_hooks"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Setting up pacman maintenance hooks")
        run_cmd(["mkdir", "-p", HOOKS_DIR], sudo=True, dry_run=ctx.dry_run)
        write_root_file(f"{HOOKS_DIR}/pacman-log-orphans.hook", ORPHANS_HOOK, dry_run=ctx.dry_run)
        write_root_file(f"{HOOKS_DIR}/pacman-cache.hook", CACHE_HOOK, dry_run=ctx.dry_run)
        logger.info("Pacman hooks installed")
        return True

