from __future__ import annotations

import logging
import shutil
import time
from typing import List

from ..lib.command import run_cmd
from ..lib.files import write_root_file
from ..lib.pacman import pacman_install
from ..lib.systemd import enable_service, restart_service
from .context import SetupContext

logger = logging.getLogger(__name__)

POWERSAVE_CONF = "/etc/NetworkManager/conf.d/wifi-powersave-off.conf"


def wifi_interfaces(*, dry_run: bool = False) -> List[str]:
    r = run_cmd(["nmcli", "-t", "-f", "DEVICE,TYPE", "device"], check=False, dry_run=dry_run)
    devices = []
    for line in r.stdout.splitlines():
        name, _, kind = line.partition(":")
        if kind.strip() == "wifi" and name.strip():
            devices.append(name.strip())
    return devices


class ConnectWifiStep:
    step_id = "connect_wifi"
    critical = True

    def _ensure_networkmanager(self, ctx: SetupContext) -> None:
        if shutil.which("nmcli"):
            return
        logger.info("NetworkManager not found. Installing...")
        pacman_install(["networkmanager"], dry_run=ctx.dry_run)
        enable_service("NetworkManager", dry_run=ctx.dry_run)
        if not ctx.dry_run:
            time.sleep(2)

    def _pick_device(self, ctx: SetupContext) -> str | None:
        devices = wifi_interfaces(dry_run=ctx.dry_run)
        if not devices:
            logger.error("No wireless interfaces found")
            return None
        if len(devices) == 1:
            logger.info("Using wireless interface: %s", devices[0])
            return devices[0]
        ctx.prompter.show("Multiple wireless interfaces found:")
        device = ctx.prompter.choose("Select interface", devices)
        logger.info("Selected wireless interface: %s", device)
        return device

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Establishing network connectivity via NetworkManager")
        self._ensure_networkmanager(ctx)

        if ctx.dry_run:
            logger.info("Dry run: would pick a wireless interface and ask which network to join")
            return True

        device = self._pick_device(ctx)
        if device is None:
            return False

        logger.info("Enabling wireless interface %s", device)
        run_cmd(["nmcli", "radio", "wifi", "on"], sudo=True, dry_run=ctx.dry_run)
        run_cmd(["nmcli", "device", "set", device, "autoconnect", "yes"], sudo=True, dry_run=ctx.dry_run)

        while True:
            logger.info("Scanning for available networks...")
            run_cmd(["nmcli", "device", "wifi", "rescan"], sudo=True, check=False, dry_run=ctx.dry_run)
            if not ctx.dry_run:
                time.sleep(ctx.cfg.wifi_scan_wait_s)

            listing = run_cmd(
                ["nmcli", "-t", "-f", "SSID,SIGNAL,SECURITY", "device", "wifi", "list"],
                check=False,
                dry_run=ctx.dry_run,
            )
            ctx.prompter.show("\n===== Available Wi-Fi Networks =====\n")
            ctx.prompter.show(_strongest(listing.stdout, limit=15))
            ctx.prompter.show("\n===================================")

            ssid = ctx.prompter.ask("SSID (leave empty to enter a hidden network)")
            if not ssid:
                ssid = ctx.prompter.ask("Enter hidden SSID")
                if not ssid:
                    logger.error("No SSID provided. Aborting.")
                    return False

            password = ctx.prompter.ask(
                f"Enter password for '{ssid}' (leave empty for open networks)", password=True
            )

            run_cmd(["nmcli", "connection", "delete", ssid], sudo=True, check=False, dry_run=ctx.dry_run)

            logger.info("Attempting to connect to %s...", ssid)
            argv = ["nmcli", "device", "wifi", "connect", ssid]
            if password:
                argv += ["password", password]
            argv += ["ifname", device]
            network_type = "secured" if password else "open"

            r = run_cmd(
                argv,
                sudo=True,
                check=False,
                redact=[password] if password else (),
                dry_run=ctx.dry_run,
            )
            if r.ok:
                logger.info("Successfully connected to %s network: %s", network_type, ssid)
                return True

            logger.warning("Failed to connect to %s network: %s", network_type, ssid)
            if not ctx.prompter.confirm("Would you like to try again?"):
                return False


def _strongest(listing: str, *, limit: int) -> str:
    """Render terse nmcli output (SSID:SIGNAL:SECURITY), strongest first."""

    rows = []
    for line in listing.splitlines():
        parts = line.rsplit(":", 2)
        if len(parts) != 3:
            continue
        ssid, signal, security = parts
        ssid = ssid.replace("\\:", ":")
        rows.append((int(signal) if signal.isdigit() else 0, ssid or "<hidden>", security or "--"))
    if not rows:
        return "No networks found."

    rows.sort(key=lambda r: r[0], reverse=True)
    width = max(len(r[1]) for r in rows[:limit])
    lines = ["SSID".ljust(width) + "  SIGNAL  SECURITY"]
    lines += [f"{ssid.ljust(width)}  {signal:>6}  {security}" for signal, ssid, security in rows[:limit]]
    return "\n".join(lines)


class DisableWifiPowersaveStep:
    step_id = "disable_wifi_powersave"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Disabling WiFi power saving")
        write_root_file(POWERSAVE_CONF, "[connection]\nwifi.powersave = 2\n", dry_run=ctx.dry_run)
        restart_service("NetworkManager", dry_run=ctx.dry_run)
        if not ctx.dry_run:
            time.sleep(ctx.cfg.wifi_powersave_wait_s)
        logger.info("WiFi power saving disabled")
        return True
