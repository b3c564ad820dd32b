from __future__ import annotations

from functools import partial
from typing import List

from ..runner import Step
from .boot import ConfigureNvidiaModulesStep, ConfigureSystemdBootStep, RenameBootloaderEntriesStep
from .bluetooth import EnableBluetoothStep, PairBluetoothMouseStep
from .cleanup import CleanupStep
from .context import SetupContext
from .desktop import InstallKdeThemesStep
from .dnie import SetupDnieStep
from .network import ConnectWifiStep, DisableWifiPowersaveStep
from .packages import (
    ConfigurePacmanStep,
    InstallPacmanPackagesStep,
    InstallYayPackagesStep,
    InstallYayStep,
    SetupFlatpakStep,
    SetupPacmanHooksStep,
    SetupReflectorStep,
)
from .performance import SetupGamemodeStep, SetupTunedStep, SetupWineStep
from .shell import ChangeDefaultShellStep
from .virtualization import SetupVirtualizationStep

# Order matters: the resume marker refers to positions in this list.
SETUP_STEPS = [
    ConnectWifiStep(),
    EnableBluetoothStep(),
    PairBluetoothMouseStep(),
    ConfigurePacmanStep(),
    SetupReflectorStep(),
    InstallPacmanPackagesStep(),
    SetupTunedStep(),
    InstallYayStep(),
    InstallYayPackagesStep(),
    SetupFlatpakStep(),
    RenameBootloaderEntriesStep(),
    ConfigureSystemdBootStep(),
    ConfigureNvidiaModulesStep(),
    SetupPacmanHooksStep(),
    InstallKdeThemesStep(),
    DisableWifiPowersaveStep(),
    SetupWineStep(),
    SetupGamemodeStep(),
    SetupVirtualizationStep(),
    SetupDnieStep(),
    ChangeDefaultShellStep(),
    CleanupStep(),
]


def build_sequence(ctx: SetupContext, steps=None) -> List[Step]:
    """Bind each setup step to the context, giving the runner plain actions."""

    return [
        Step(name=s.step_id, critical=s.critical, action=partial(s.run, ctx))
        for s in (SETUP_STEPS if steps is None else steps)
    ]


__all__ = [
    "SETUP_STEPS",
    "SetupContext",
    "build_sequence",
]
