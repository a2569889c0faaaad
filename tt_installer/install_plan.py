# tt_installer/install_plan.py
# -*- coding: utf-8 -*-
"""
Builds the ordered install plan from the application settings.

One plan covers every variant of the installation; optional components are
toggled by configuration (for example --nobuda disables the TT-Buda phase).
"""

from common.phase_models import FailurePolicy, InstallPlan, PhaseSpec
from tt_installer.config_models import AppSettings
from tt_installer.phases.firmware import (
    download_firmware,
    flash_firmware,
    install_flash_tool,
)
from tt_installer.phases.hugepages import configure_hugepages
from tt_installer.phases.kmd import install_kmd
from tt_installer.phases.management_tools import (
    install_smi,
    install_topology,
    verify_devices,
)
from tt_installer.phases.prerequisites import install_prerequisites
from tt_installer.phases.sdk import (
    install_buda,
    install_forge,
    install_metalium,
    install_profiling_deps,
)

FIRMWARE_REBOOT_MESSAGE = "A system reboot is REQUIRED to apply the new firmware."

MANDATORY_PHASES = (
    "prerequisites",
    "tt-kmd",
    "tt-flash",
    "firmware-download",
    "firmware-flash",
    "hugepages",
    "tt-smi",
    "verify-devices",
)
OPTIONAL_PHASES = (
    "tt-topology",
    "profiling-deps",
    "tt-metalium",
    "tt-buda",
    "tt-forge",
)
SDK_PHASES = ("tt-metalium", "tt-buda", "tt-forge")


def build_install_plan(app_settings: AppSettings) -> InstallPlan:
    sdk = app_settings.sdk
    install_root = app_settings.install_root
    phases = [
        PhaseSpec(
            name="prerequisites",
            description="Updating package list and installing prerequisites",
            func=install_prerequisites,
            enabled=not app_settings.skip_prerequisites,
        ),
        PhaseSpec(
            name="tt-kmd",
            description="Installing Tenstorrent Kernel-Mode Driver (TT-KMD)",
            func=install_kmd,
        ),
        PhaseSpec(
            name="tt-flash",
            description="Installing TT-Flash utility",
            func=install_flash_tool,
        ),
        PhaseSpec(
            name="firmware-download",
            description="Downloading device firmware bundle",
            func=download_firmware,
        ),
        PhaseSpec(
            name="firmware-flash",
            description="Updating Tenstorrent device firmware",
            func=flash_firmware,
            policy=FailurePolicy.WARN,
            reboot_after=FIRMWARE_REBOOT_MESSAGE,
        ),
        PhaseSpec(
            name="hugepages",
            description="Setting up HugePages",
            func=configure_hugepages,
        ),
        PhaseSpec(
            name="tt-smi",
            description="Installing Tenstorrent System Management Interface (TT-SMI)",
            func=install_smi,
        ),
        PhaseSpec(
            name="verify-devices",
            description="Verifying system configuration",
            func=verify_devices,
        ),
        PhaseSpec(
            name="tt-topology",
            description="Installing TT-Topology (optional, for multi-card systems)",
            func=install_topology,
            policy=FailurePolicy.WARN,
            optional=True,
            confirm_prompt=(
                "Install TT-Topology? It is only needed to change the topology of a "
                "multi-card system such as TT-LoudBox/QuietBox."
            ),
            enabled=app_settings.tools.offer_topology,
        ),
        PhaseSpec(
            name="profiling-deps",
            description="Installing profiling dependencies",
            func=install_profiling_deps,
            policy=FailurePolicy.WARN,
            optional=True,
            confirm_prompt=f"Install profiling dependencies ({' '.join(sdk.profiling_packages)})?",
            enabled=sdk.offer_profiling_deps,
        ),
        PhaseSpec(
            name="tt-metalium",
            description="Installing TT-Metalium SDK",
            func=install_metalium,
            optional=True,
            confirm_prompt=f"Clone and build TT-Metalium in {install_root / sdk.metalium.dir_name}?",
            enabled=sdk.metalium.enabled,
        ),
        PhaseSpec(
            name="tt-buda",
            description="Installing TT-Buda SDK",
            func=install_buda,
            optional=True,
            confirm_prompt=f"Clone and build TT-Buda in {install_root / sdk.buda.dir_name}?",
            enabled=sdk.buda.enabled,
        ),
        PhaseSpec(
            name="tt-forge",
            description="Installing TT-Forge SDK",
            func=install_forge,
            optional=True,
            confirm_prompt=f"Clone and build TT-Forge in {install_root / sdk.forge.dir_name}?",
            enabled=sdk.forge.enabled,
        ),
    ]
    return InstallPlan(phases=tuple(phases))
