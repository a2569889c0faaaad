# tt_installer/environment_probe.py
# -*- coding: utf-8 -*-
"""
Checks that the machine can be provisioned before anything is modified.

The probe reads the distribution identity, confirms the process can elevate
its privileges and records which required tools are on PATH. Every failure is
raised as an EnvironmentCheckError subclass.
"""

import logging
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from common.command_utils import command_exists, log_installer, run_command
from common.system_utils import is_root
from tt_installer import config as static_config
from tt_installer.config_models import AppSettings
from tt_installer.errors import (
    DistributionUnsupportedError,
    MissingDependencyError,
    PrivilegeError,
)

module_logger = logging.getLogger(__name__)


class EnvironmentFacts(BaseModel):
    """What the probe found. Read-only after the probe returns."""

    model_config = ConfigDict(frozen=True)

    distribution_id: str
    distribution_version: str
    distribution_codename: Optional[str] = None
    supported_version: bool = True
    is_root: bool = False
    sudo_available: bool = False
    available_commands: Dict[str, bool] = {}

    @property
    def missing_commands(self) -> List[str]:
        return [
            name for name, present in self.available_commands.items() if not present
        ]


def _parse_release_file(path: Path) -> Dict[str, str]:
    """Parses a shell-style KEY=value file such as /etc/lsb-release."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DistributionUnsupportedError(f"Could not read {path}: {e}") from e
    values: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def read_distribution(
    lsb_path: Path = static_config.LSB_RELEASE_PATH,
    os_release_path: Path = static_config.OS_RELEASE_PATH,
) -> Tuple[str, str, Optional[str]]:
    """
    Returns (distribution id, version, codename).

    /etc/lsb-release is preferred. /etc/os-release is the fallback; its
    lower-case ID (e.g. 'ubuntu') is capitalized to match DISTRIB_ID.
    """
    if lsb_path.is_file():
        values = _parse_release_file(lsb_path)
        if values.get("DISTRIB_ID"):
            return (
                values["DISTRIB_ID"],
                values.get("DISTRIB_RELEASE", ""),
                values.get("DISTRIB_CODENAME") or None,
            )
    if os_release_path.is_file():
        values = _parse_release_file(os_release_path)
        if values.get("ID"):
            return (
                values["ID"].capitalize(),
                values.get("VERSION_ID", ""),
                values.get("VERSION_CODENAME") or None,
            )
    raise DistributionUnsupportedError(
        f"No {lsb_path} or {os_release_path} file. Unable to detect distribution."
    )


def check_distribution(
    app_settings: AppSettings,
    confirm: Callable[[str], bool],
    current_logger: Optional[logging.Logger] = None,
    lsb_path: Path = static_config.LSB_RELEASE_PATH,
    os_release_path: Path = static_config.OS_RELEASE_PATH,
) -> Tuple[str, str, Optional[str], bool]:
    """
    Accepts a supported distribution and version silently. Other versions of
    the supported distribution need an affirmative answer from `confirm`.

    Returns:
        (distribution id, version, codename, version is supported)
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    dist_id, version, codename = read_distribution(lsb_path, os_release_path)
    expected = app_settings.supported_distribution

    if dist_id != expected:
        log_installer(
            f"{symbols.get('error', '❌')} '{dist_id}' is not a supported software distribution.",
            "error",
            logger_to_use,
            app_settings,
        )
        raise DistributionUnsupportedError(
            f"'{dist_id}' is not supported. Tenstorrent stack installation currently targets {expected}."
        )

    if version in app_settings.supported_versions:
        codename_str = f" ({codename})" if codename else ""
        log_installer(
            f"{symbols.get('success', '✅')} {dist_id} {version}{codename_str} detected. Proceeding...",
            "info",
            logger_to_use,
            app_settings,
        )
        return dist_id, version, codename, True

    recommended = ", ".join(app_settings.supported_versions)
    log_installer(
        f"{symbols.get('warning', '⚠️')} '{dist_id} {version}' is not the recommended distribution. "
        f"The recommended release is {dist_id} {recommended}. "
        "Installation on other versions is experimental and may not work.",
        "warning",
        logger_to_use,
        app_settings,
    )
    if not confirm("Do you want to attempt installation anyway?"):
        raise DistributionUnsupportedError("Installation aborted by user.")
    log_installer(
        f"{symbols.get('warning', '⚠️')} Proceeding with installation on untested {dist_id} version.",
        "warning",
        logger_to_use,
        app_settings,
    )
    return dist_id, version, codename, False


def check_privileges(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> Tuple[bool, bool]:
    """
    Returns (is root, sudo available). A non-root process must be able to
    validate its sudo credentials ('sudo -v').

    Raises:
        PrivilegeError: Not root and sudo is missing or refused.
    """
    logger_to_use = current_logger if current_logger else module_logger
    if is_root():
        return True, command_exists("sudo")

    log_installer(
        "This installer requires root privileges for installation steps. "
        "Attempting to validate sudo credentials...",
        "info",
        logger_to_use,
        app_settings,
    )
    if not command_exists("sudo"):
        raise PrivilegeError(
            "Not running as root and 'sudo' is not installed. Re-run as root."
        )
    try:
        run_command(
            ["sudo", "-v"],
            app_settings,
            check=True,
            current_logger=logger_to_use,
        )
    except (subprocess.CalledProcessError, OSError) as e:
        raise PrivilegeError(
            "sudo command failed or password incorrect. Please ensure you have sudo privileges."
        ) from e
    return False, True


def probe_commands(command_names: Sequence[str]) -> Dict[str, bool]:
    return {name: command_exists(name) for name in command_names}


def require_commands(command_names: Sequence[str]) -> None:
    """
    Raises:
        MissingDependencyError: Naming the first command not found in PATH.
    """
    for name in command_names:
        if not command_exists(name):
            raise MissingDependencyError(name)


def probe_environment(
    app_settings: AppSettings,
    confirm: Callable[[str], bool],
    current_logger: Optional[logging.Logger] = None,
    lsb_path: Path = static_config.LSB_RELEASE_PATH,
    os_release_path: Path = static_config.OS_RELEASE_PATH,
) -> EnvironmentFacts:
    """
    Runs every environment check in order: distribution, privileges, tools.

    Required tools are enforced here only with `skip_prerequisites`; otherwise
    the prerequisites phase installs them and checks afterwards.
    """
    logger_to_use = current_logger if current_logger else module_logger
    dist_id, version, codename, supported = check_distribution(
        app_settings, confirm, logger_to_use, lsb_path, os_release_path
    )
    root, sudo_available = check_privileges(app_settings, logger_to_use)

    facts = EnvironmentFacts(
        distribution_id=dist_id,
        distribution_version=version,
        distribution_codename=codename,
        supported_version=supported,
        is_root=root,
        sudo_available=sudo_available,
        available_commands=probe_commands(app_settings.required_tools),
    )
    missing = facts.missing_commands
    if missing:
        if app_settings.skip_prerequisites:
            raise MissingDependencyError(
                missing[0],
                f"Required command '{missing[0]}' was not found in PATH and "
                "--skip-prerequisites was given. Install it or drop the flag.",
            )
        log_installer(
            f"Tools not yet available (installed by the prerequisites phase): {', '.join(missing)}",
            "debug",
            logger_to_use,
            app_settings,
        )

    return facts
