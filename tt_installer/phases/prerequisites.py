# tt_installer/phases/prerequisites.py
# -*- coding: utf-8 -*-
"""
Installs the system packages every later phase relies on.
"""

from common.command_utils import log_installer
from common.debian.apt_manager import AptManager
from common.phase_models import PhaseContext, PhaseOutcome
from tt_installer.environment_probe import require_commands


def install_prerequisites(ctx: PhaseContext) -> PhaseOutcome:
    app_settings = ctx.app_settings
    symbols = app_settings.symbols
    try:
        apt = AptManager(ctx.installer, ctx.logger)
    except FileNotFoundError as e:
        return PhaseOutcome.failure(str(e))

    if not apt.update():
        return PhaseOutcome.failure(
            "Failed to update package lists.",
            "Check network access and the apt sources, then re-run the installer.",
        )
    if not apt.install(app_settings.prerequisite_packages, update_first=False):
        return PhaseOutcome.failure(
            "Failed to install prerequisite packages: "
            + " ".join(app_settings.prerequisite_packages),
            "Run 'sudo apt-get install -y "
            + " ".join(app_settings.prerequisite_packages)
            + "' manually to see the error.",
        )

    # MissingDependencyError propagates; the sequencer records it as a failure.
    require_commands(app_settings.required_tools)
    log_installer(
        f"{symbols.get('success', '✅')} Prerequisites installed successfully.",
        "success",
        ctx.logger,
        app_settings,
    )
    return PhaseOutcome.success("Prerequisites installed.")
