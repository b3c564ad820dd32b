from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from ..lib.command import run_cmd
from ..lib.files import add_user_to_group, sed_in_place, write_root_file
from ..lib.pacman import pacman_install
from ..lib.systemd import enable_units
from .context import SetupContext

logger = logging.getLogger(__name__)

LIBVIRT_DRIVERS = ["qemu", "interface", "network", "nodedev", "nwfilter", "secret", "storage"]
LIBVIRT_IMAGES = "/var/lib/libvirt/images/"
KVM_INTEL_CONF = "/etc/modprobe.d/kvm-intel.conf"


def libvirt_units() -> Tuple[List[str], List[str]]:
    """Modular libvirt daemons: one service and three sockets per driver."""

    services = [f"virt{drv}d.service" for drv in LIBVIRT_DRIVERS]
    sockets = [f"virt{drv}d{suffix}.socket" for drv in LIBVIRT_DRIVERS for suffix in ("", "-ro", "-admin")]
    return services, sockets


class SetupVirtualizationStep:
    step_id = "setup_virtualization"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Installing QEMU/KVM virtualization")
        pacman_install(ctx.cfg.virtualization_packages, dry_run=ctx.dry_run)

        logger.info("Enabling virtualization services")
        services, sockets = libvirt_units()
        enable_units(services, dry_run=ctx.dry_run)
        enable_units(sockets, dry_run=ctx.dry_run)

        logger.info("Enabling advanced virtualization features")
        write_root_file(KVM_INTEL_CONF, "options kvm_intel nested=1\n", dry_run=ctx.dry_run)

        logger.info("Configuring IOMMU for device passthrough")
        sed_in_place(
            str(Path(ctx.cfg.boot_entries_dir) / "arch.conf"),
            ["/^options/ s/$/ intel_iommu=on iommu=pt/"],
            dry_run=ctx.dry_run,
        )

        logger.info("Setting up virtualization permissions")
        add_user_to_group(ctx.user, "libvirt", dry_run=ctx.dry_run)

        logger.info("Configuring virtualization storage access")
        for argv in (
            ["setfacl", "-R", "-b", LIBVIRT_IMAGES],
            ["setfacl", "-R", "-m", f"u:{ctx.user}:rwX", LIBVIRT_IMAGES],
            ["setfacl", "-m", f"d:u:{ctx.user}:rwx", LIBVIRT_IMAGES],
        ):
            run_cmd(argv, sudo=True, dry_run=ctx.dry_run)

        logger.info("Virtualization setup complete")
        return True
