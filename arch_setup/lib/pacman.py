from __future__ import annotations

import logging
from typing import Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


def pacman_sync(*, dry_run: bool = False) -> None:
    run_cmd(["pacman", "-Syy"], sudo=True, dry_run=dry_run)


def pacman_install(
    packages: Sequence[str],
    *,
    asdeps: bool = False,
    sync_upgrade: bool = False,
    dry_run: bool = False,
) -> None:
    if not packages:
        return
    argv = ["pacman", "-Syu" if sync_upgrade else "-S", "--needed", "--noconfirm"]
    if asdeps:
        argv.append("--asdeps")
    run_cmd([*argv, *packages], sudo=True, capture=False, dry_run=dry_run)


def yay_install(packages: Sequence[str], *, dry_run: bool = False) -> None:
    """Install AUR packages. yay elevates on its own, so it never runs under sudo."""
    if not packages:
        return
    run_cmd(["yay", "-S", "--needed", "--noconfirm", *packages], capture=False, dry_run=dry_run)


def list_orphans(*, dry_run: bool = False) -> list[str]:
    # pacman -Qtdq exits 1 when there is nothing to report.
    r = run_cmd(["pacman", "-Qtdq"], check=False, dry_run=dry_run)
    if not r.ok:
        return []
    return [line.strip() for line in r.stdout.splitlines() if line.strip()]


def remove_packages(packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    run_cmd(["pacman", "-Rns", "--noconfirm", *packages], sudo=True, dry_run=dry_run)
