# tt_installer/phases/firmware.py
# -*- coding: utf-8 -*-
"""
TT-Flash utility and device firmware.

The firmware bundle is downloaded by one phase and flashed by the next, so a
failed download halts the run while a failed flash only warns: tt-flash also
exits non-zero when the installed firmware is already the same or newer.
"""

from common.command_utils import log_installer
from common.file_utils import make_temp_file, remove_path
from common.phase_models import PhaseContext, PhaseOutcome
from common.system_utils import ensure_command_on_path, resolve_command

FIRMWARE_BUNDLE_STATE_KEY = "firmware_bundle_path"
FIRMWARE_TEMP_PREFIX = "tt-firmware-"
FIRMWARE_TEMP_SUFFIX = ".fwbundle"


def install_flash_tool(ctx: PhaseContext) -> PhaseOutcome:
    app_settings = ctx.app_settings
    symbols = app_settings.symbols
    log_installer(
        f"{symbols.get('info', 'ℹ️')} Installing Python packages system-wide via pip. A virtual "
        "environment or pipx gives better isolation if you hit 'externally-managed-environment' errors.",
        "info",
        ctx.logger,
        app_settings,
    )
    upgrade = ctx.installer.run(
        "Upgrading pip",
        ["pip3", "install", "--upgrade", "pip"],
        elevated=True,
    )
    if not upgrade.ok:
        log_installer(
            f"{symbols.get('warning', '⚠️')} Could not upgrade pip. Continuing with the installed version.",
            "warning",
            ctx.logger,
            app_settings,
        )

    result = ctx.installer.pip_install(
        "Installing TT-Flash utility", f"git+{app_settings.firmware.flash_repo}"
    )
    if not result.ok:
        return PhaseOutcome.from_call(result, "Check the pip output above.")

    ensure_command_on_path("tt-flash", app_settings, ctx.logger)
    return PhaseOutcome.success("TT-Flash installed.")


def download_firmware(ctx: PhaseContext) -> PhaseOutcome:
    app_settings = ctx.app_settings
    firmware = app_settings.firmware

    bundle_path = make_temp_file(FIRMWARE_TEMP_PREFIX, FIRMWARE_TEMP_SUFFIX)
    result = ctx.installer.run(
        f"Downloading firmware bundle ({firmware.version})",
        ["wget", "--quiet", "-O", str(bundle_path), firmware.url],
    )
    if not result.ok:
        remove_path(bundle_path, app_settings, ctx.logger)
        return PhaseOutcome.failure(
            f"Failed to download firmware file from {firmware.url}",
            "Check network access and the firmware version in the configuration.",
        )

    ctx.state[FIRMWARE_BUNDLE_STATE_KEY] = bundle_path
    return PhaseOutcome.success(f"Firmware downloaded to {bundle_path}.")


def flash_firmware(ctx: PhaseContext) -> PhaseOutcome:
    app_settings = ctx.app_settings
    symbols = app_settings.symbols
    bundle_path = ctx.state.pop(FIRMWARE_BUNDLE_STATE_KEY, None)
    if bundle_path is None:
        return PhaseOutcome.failure("No firmware bundle was downloaded.")

    command = [resolve_command("tt-flash"), "--fw-tar", str(bundle_path)]
    if app_settings.firmware.force:
        command.append("--force")
    try:
        result = ctx.installer.run(
            "Flashing firmware with TT-Flash", command, elevated=True
        )
    finally:
        remove_path(bundle_path, app_settings, ctx.logger)

    if not result.ok:
        return PhaseOutcome.failure(
            "Firmware flash command failed. This might be expected if the existing "
            "firmware is newer or the same.",
            "If the error says the new firmware is older than required, re-run with "
            "--force-flash (equivalent to 'sudo tt-flash --fw-tar <bundle> --force'). "
            "Consult the Tenstorrent documentation if issues persist.",
        )

    log_installer(
        f"{symbols.get('success', '✅')} Firmware flash command executed. Check the output above for details.",
        "success",
        ctx.logger,
        app_settings,
    )
    return PhaseOutcome.success("Firmware flashed.")
