# tt_installer/phases/hugepages.py
# -*- coding: utf-8 -*-
"""
Configures 1G HugePages via the tenstorrent-tools package and its systemd units.
"""

from common.command_utils import log_installer
from common.debian.apt_manager import AptManager
from common.file_utils import make_temp_file, remove_path
from common.phase_models import PhaseContext, PhaseOutcome
from common.system_utils import systemd_enable_now

TOOLS_DEB_TEMP_PREFIX = "tenstorrent-tools-"


def configure_hugepages(ctx: PhaseContext) -> PhaseOutcome:
    app_settings = ctx.app_settings
    tools = app_settings.system_tools
    symbols = app_settings.symbols

    deb_path = make_temp_file(TOOLS_DEB_TEMP_PREFIX, ".deb")
    try:
        result = ctx.installer.run(
            "Downloading tenstorrent-tools package",
            ["wget", "--quiet", "-O", str(deb_path), tools.deb_url],
        )
        if not result.ok:
            return PhaseOutcome.failure(
                f"Failed to download tenstorrent-tools .deb package from {tools.deb_url}",
                "Check network access and the tools version in the configuration.",
            )

        try:
            apt = AptManager(ctx.installer, ctx.logger)
        except FileNotFoundError as e:
            return PhaseOutcome.failure(str(e))
        if not apt.install_deb(str(deb_path)):
            return PhaseOutcome.failure(
                "Failed to install tenstorrent-tools .deb package.",
                "dpkg does not resolve dependencies. Run 'sudo apt-get install -f -y' and re-run.",
            )

        for unit in (tools.hugepages_service, tools.hugepages_mount):
            result = systemd_enable_now(unit, ctx.installer)
            if not result.ok:
                return PhaseOutcome.from_call(
                    result, f"Inspect 'systemctl status {unit}' for details."
                )
    finally:
        remove_path(deb_path, app_settings, ctx.logger)

    log_installer(
        f"{symbols.get('success', '✅')} HugePages configuration applied. A reboot is recommended "
        "to ensure HugePages are fully configured and available at boot.",
        "success",
        ctx.logger,
        app_settings,
    )
    return PhaseOutcome.success("HugePages configured.")
