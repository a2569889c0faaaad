# tt_installer/phases/management_tools.py
# -*- coding: utf-8 -*-
"""
TT-SMI, TT-Topology and the device verification run.
"""

from common.command_utils import log_installer
from common.phase_models import PhaseContext, PhaseOutcome
from common.system_utils import ensure_command_on_path, resolve_command


def install_topology(ctx: PhaseContext) -> PhaseOutcome:
    result = ctx.installer.pip_install(
        "Installing TT-Topology utility",
        f"git+{ctx.app_settings.tools.topology_repo}",
    )
    if not result.ok:
        return PhaseOutcome.from_call(result, "Check the pip output above.")
    log_installer(
        "TT-Topology installed. Run 'tt-topology -l mesh' manually if needed to configure topology.",
        "info",
        ctx.logger,
        ctx.app_settings,
    )
    return PhaseOutcome.success("TT-Topology installed.")


def install_smi(ctx: PhaseContext) -> PhaseOutcome:
    result = ctx.installer.pip_install(
        "Installing TT-SMI utility", f"git+{ctx.app_settings.tools.smi_repo}"
    )
    if not result.ok:
        return PhaseOutcome.from_call(result, "Check the pip output above.")
    ensure_command_on_path("tt-smi", ctx.app_settings, ctx.logger)
    return PhaseOutcome.success("TT-SMI installed.")


def verify_devices(ctx: PhaseContext) -> PhaseOutcome:
    """Run tt-smi elevated; a non-zero exit means the devices are not usable."""
    app_settings = ctx.app_settings
    symbols = app_settings.symbols
    command = list(app_settings.tools.verify_command)
    command[0] = resolve_command(command[0])

    result = ctx.installer.run(
        "Verifying device detection with TT-SMI", command, elevated=True
    )
    if not result.ok:
        return PhaseOutcome.failure(
            "TT-SMI verification failed. This may indicate issues with KMD, firmware, "
            "permissions or hardware detection.",
            "A reboot is often required after installation. Reboot, run 'sudo tt-smi' "
            "and re-run the installer.",
        )
    log_installer(
        f"{symbols.get('success', '✅')} tt-smi executed successfully. Review the output above.",
        "success",
        ctx.logger,
        app_settings,
    )
    return PhaseOutcome.success("Devices detected.")
