from __future__ import annotations

import logging
import re
from typing import List, Tuple

from ..lib.command import run_cmd
from ..lib.pacman import pacman_install
from ..lib.systemd import enable_service
from .context import SetupContext

logger = logging.getLogger(__name__)

MAC_RE = re.compile(r"^([0-9A-Fa-f]{2}:){5}[0-9A-Fa-f]{2}$")
DEVICE_RE = re.compile(r"Device ([0-9A-Fa-f:]{17}) (.+)")


class EnableBluetoothStep:
    step_id = "enable_bluetooth"
    critical = True

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Enabling Bluetooth service")
        enable_service("bluetooth", dry_run=ctx.dry_run)
        return True


def discovered_devices(*, dry_run: bool = False) -> List[Tuple[str, str]]:
    r = run_cmd(["bluetoothctl", "devices"], check=False, dry_run=dry_run)
    devices = []
    for line in r.stdout.splitlines():
        m = DEVICE_RE.search(line)
        if m:
            devices.append((m.group(1), m.group(2).strip()))
    return devices


class PairBluetoothMouseStep:
    step_id = "pair_bluetooth_mouse"
    critical = False

    def _scan(self, ctx: SetupContext) -> None:
        ctx.prompter.show("\nScanning for Bluetooth devices...")
        run_cmd(
            ["bluetoothctl", "--timeout", str(ctx.cfg.bluetooth_scan_s), "scan", "on"],
            check=False,
            dry_run=ctx.dry_run,
        )
        devices = discovered_devices(dry_run=ctx.dry_run)
        ctx.prompter.show("\n=== Available Bluetooth Devices ===")
        if devices:
            ctx.prompter.show("\n".join(f"Device {mac} {name}" for mac, name in devices))
        else:
            ctx.prompter.show("No devices found. Try rescanning.")
        ctx.prompter.show("================================")

    def _ask_mac(self, ctx: SetupContext) -> str:
        while True:
            answer = ctx.prompter.ask(
                "Enter the MAC address of your mouse from the list above, or type 'rescan'"
            )
            if answer.lower() == "rescan":
                self._scan(ctx)
                continue
            if not MAC_RE.match(answer):
                ctx.prompter.show("Invalid MAC address format. Please use the format XX:XX:XX:XX:XX:XX")
                continue
            return answer

    def run(self, ctx: SetupContext) -> bool:
        logger.info("Starting Bluetooth mouse pairing process")
        pacman_install(["bluez-utils"], dry_run=ctx.dry_run)

        if ctx.dry_run:
            logger.info("Dry run: would scan for devices and ask which mouse to pair")
            return True

        r = run_cmd(["bluetoothctl", "power", "on"], check=False, dry_run=ctx.dry_run)
        if not r.ok:
            logger.error("No Bluetooth controller available. Please check your hardware.")
            return False

        self._scan(ctx)
        mac = self._ask_mac(ctx)
        logger.info("Pairing with device: %s", mac)

        r = run_cmd(["bluetoothctl", "--agent", "KeyboardOnly", "pair", mac], check=False, dry_run=ctx.dry_run)
        if not r.ok:
            logger.error("Failed to pair with %s. The device might need to be in pairing mode.", mac)
            return False

        r = run_cmd(["bluetoothctl", "connect", mac], check=False, dry_run=ctx.dry_run)
        if not r.ok:
            logger.error("Failed to connect to %s", mac)
            return False

        r = run_cmd(["bluetoothctl", "trust", mac], check=False, dry_run=ctx.dry_run)
        if r.ok:
            logger.info("Device trusted for automatic reconnection")
        else:
            logger.warning("Could not trust %s; it may not reconnect automatically", mac)

        logger.info("Bluetooth mouse paired successfully")
        return True
