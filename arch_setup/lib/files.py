from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


def sed_in_place(path: str, expressions: Sequence[str], *, dry_run: bool = False) -> None:
    """Apply sed expressions to a root-owned file."""

    argv = ["sed", "-i"]
    for expr in expressions:
        argv += ["-e", expr]
    run_cmd([*argv, path], sudo=True, dry_run=dry_run)
    logger.info("Configuration in %s modified", path)


def write_root_file(path: str, content: str, *, dry_run: bool = False) -> None:
    run_cmd(["tee", path], sudo=True, input_text=content, dry_run=dry_run)


def append_to_file(path: str, content: str, *, dry_run: bool = False) -> None:
    p = Path(path).expanduser()
    if dry_run:
        logger.info("Would append %d bytes to %s", len(content), str(p))
        return
    with p.open("a", encoding="utf-8") as f:
        f.write(content)


def user_groups(user: str, *, dry_run: bool = False) -> list[str]:
    r = run_cmd(["id", "-nG", user], check=False, dry_run=dry_run)
    return r.stdout.split()


def add_user_to_group(user: str, group: str, *, dry_run: bool = False) -> None:
    if group in user_groups(user, dry_run=dry_run):
        logger.info("User %s already in %s group", user, group)
        return
    run_cmd(["usermod", "-aG", group, user], sudo=True, dry_run=dry_run)
    logger.info("Added user %s to %s group", user, group)
