# tt_installer/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles Command Line Interface (CLI) interactions for the installer:
confirmation gates, reboot checkpoints and the configuration view.
"""

import datetime
import logging
from typing import Optional

from common.command_utils import log_installer
from tt_installer import config as static_config
from tt_installer.config_models import AppSettings

module_logger = logging.getLogger(__name__)

AFFIRMATIVE_ANSWERS = ("y", "yes")


def cli_confirm(
    prompt_message: str,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> bool:
    """
    Prompt the user in the CLI with a y/N question. It defaults to "No" upon
    receiving end-of-file (EOF) and answers "yes" without asking when
    `assume_yes` is set.

    Parameters:
    prompt_message : str
        The question to display.
    app_settings : AppSettings
        The application settings object providing symbols and `assume_yes`.
    current_logger_instance : Optional[logging.Logger]
        The logger instance to use for logging.

    Returns:
    bool
        True if the user answered "y" or "yes" (any case), otherwise False.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    symbols = app_settings.symbols
    if app_settings.assume_yes:
        log_installer(
            f"{symbols.get('info', 'ℹ️')} {prompt_message} (y/N): yes (--yes)",
            "info",
            logger_to_use,
            app_settings,
        )
        return True
    try:
        user_input = (
            input(f"   {symbols.get('info', 'ℹ️')} {prompt_message} (y/N): ")
            .strip()
            .lower()
        )
        return user_input in AFFIRMATIVE_ANSWERS
    except EOFError:
        log_installer(
            f"{symbols.get('warning', '!')} No user input (EOF), defaulting to 'N' for prompt: '{prompt_message}'",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False


def cli_wait_for_reboot_ack(
    message: str,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> bool:
    """
    Block until the operator acknowledges a reboot checkpoint. There is no
    timeout and `assume_yes` does not apply.

    Returns:
    bool
        True once Enter is pressed; False on EOF (nobody can acknowledge).
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    symbols = app_settings.symbols
    log_installer(
        f"{symbols.get('reboot', '🔁')} IMPORTANT: {message}",
        "warning",
        logger_to_use,
        app_settings,
    )
    try:
        input(
            f"   {symbols.get('reboot', '🔁')} Press Enter to acknowledge and continue "
            "(reboot once the installer has finished), or Ctrl+C to stop now: "
        )
    except EOFError:
        log_installer(
            f"{symbols.get('warning', '!')} No user input (EOF); reboot checkpoint not acknowledged.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False
    return True


def view_configuration(
    app_config: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Displays the current effective configuration values (CLI, YAML file,
    environment variables or model defaults).
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_config.symbols

    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > YAML > ENV > Defaults):\n\n"
    config_text += f"  Install Root:                  {app_config.install_root}\n"
    config_text += f"  Architecture (ARCH_NAME):      {app_config.arch_name}\n"
    config_text += f"  Assume Yes:                    {app_config.assume_yes}\n"
    config_text += f"  Skip Prerequisites:            {app_config.skip_prerequisites}\n"
    config_text += f"  Log Prefix (installer):        {app_config.log_prefix}\n"
    config_text += (
        f"  Supported Distribution:        {app_config.supported_distribution} "
        f"{', '.join(app_config.supported_versions)}\n"
    )
    config_text += f"  Prerequisite Packages:         {' '.join(app_config.prerequisite_packages)}\n"
    config_text += f"  Required Tools:                {' '.join(app_config.required_tools)}\n\n"

    config_text += "  TT-KMD (kmd.*):\n"
    config_text += f"    Version:                     {app_config.kmd.version}\n"
    config_text += f"    Repository:                  {app_config.kmd.repo}\n\n"

    config_text += "  Firmware (firmware.*):\n"
    config_text += f"    TT-Flash Repository:         {app_config.firmware.flash_repo}\n"
    config_text += f"    Bundle URL:                  {app_config.firmware.url}\n"
    config_text += f"    Force Flash:                 {app_config.firmware.force}\n\n"

    config_text += "  HugePages (system_tools.*):\n"
    config_text += f"    Package URL:                 {app_config.system_tools.deb_url}\n"
    config_text += f"    Units:                       {app_config.system_tools.hugepages_service}, {app_config.system_tools.hugepages_mount}\n\n"

    config_text += "  Management Tools (tools.*):\n"
    config_text += f"    TT-SMI Repository:           {app_config.tools.smi_repo}\n"
    config_text += f"    TT-Topology Repository:      {app_config.tools.topology_repo} (offered: {app_config.tools.offer_topology})\n\n"

    config_text += "  SDKs (sdk.*):\n"
    for label, component in (
        ("TT-Metalium", app_config.sdk.metalium),
        ("TT-Buda", app_config.sdk.buda),
        ("TT-Forge", app_config.sdk.forge),
    ):
        state = "enabled" if component.enabled else "disabled"
        config_text += f"    {label + ':':<29}{component.repo} -> {app_config.install_root / component.dir_name} ({state})\n"
    config_text += f"    Profiling Dependencies:      {' '.join(app_config.sdk.profiling_packages)} (offered: {app_config.sdk.offer_profiling_deps})\n\n"

    config_text += (
        f"  Script Version (static):       {static_config.SCRIPT_VERSION}\n"
    )
    config_text += f"  Timestamp (current view):      {datetime.datetime.now().strftime('%Y-%m-%d-%H%M%S')}\n\n"
    config_text += "Configuration is loaded with precedence: CLI > YAML File > Environment Variables > Model Defaults."

    log_installer(
        "Displaying current configuration:", "info", logger_to_use, app_config
    )
    log_installer(f"\n{config_text}\n", "info", logger_to_use, app_config)
