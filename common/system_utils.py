# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the installer.

This module includes helpers for privilege detection, enabling systemd units
and making freshly pip-installed commands reachable through PATH.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from common.command_utils import command_exists, log_installer
from common.phase_models import ExternalCallResult
from tt_installer.config_models import SYMBOLS_DEFAULT, AppSettings
from tt_installer.errors import MissingDependencyError

if TYPE_CHECKING:
    from common.external_installer import ExternalInstaller

module_logger = logging.getLogger(__name__)

USER_BIN_DIR_NAME = ".local/bin"


def is_root() -> bool:
    return os.geteuid() == 0


def resolve_command(command_name: str) -> str:
    """
    Absolute path of `command_name` if it is on PATH, else the bare name.
    sudo replaces PATH with its secure_path, so commands found through a PATH
    extension are passed to it by absolute path.
    """
    return shutil.which(command_name) or command_name


def systemd_enable_now(
    unit: str,
    installer: "ExternalInstaller",
) -> ExternalCallResult:
    """
    Enable and start a systemd unit ('systemctl enable --now <unit>').

    The result is returned unchanged; the caller decides whether a failure is
    fatal.
    """
    return installer.run(
        f"Enabling and starting {unit}",
        ["systemctl", "enable", "--now", unit],
        elevated=True,
    )


def ensure_command_on_path(
    command_name: str,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
    home: Optional[Path] = None,
) -> None:
    """
    Make sure `command_name` can be found through PATH.

    pip installs console scripts into ~/.local/bin when it cannot write to the
    system prefix. If the command is missing and that directory exists but is
    not on PATH, it is prepended to PATH for the rest of this process only.

    Raises:
        MissingDependencyError: The command is still not found.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )

    if command_exists(command_name):
        log_installer(
            f"{symbols.get('success', '✅')} '{command_name}' is available in PATH.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return

    user_bin = (home if home is not None else Path.home()) / USER_BIN_DIR_NAME
    path_entries = os.environ.get("PATH", "").split(os.pathsep)
    if user_bin.is_dir() and str(user_bin) not in path_entries:
        log_installer(
            f"{symbols.get('warning', '⚠️')} '{command_name}' not found in PATH. "
            f"Adding {user_bin} to PATH for this run. Add it to your shell profile "
            "to make this permanent.",
            "warning",
            logger_to_use,
            app_settings,
        )
        os.environ["PATH"] = os.pathsep.join([str(user_bin)] + path_entries)

    if not command_exists(command_name):
        raise MissingDependencyError(
            command_name,
            f"'{command_name}' was installed but is not in PATH. "
            f"Check the install output or add {user_bin} to PATH.",
        )
