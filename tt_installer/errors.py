# tt_installer/errors.py
# -*- coding: utf-8 -*-
"""
Exception hierarchy for the installer.

Environment errors are raised by the probe before anything on the machine is
modified. External call failures inside phases are normally reported as
PhaseOutcome values, or raised as ExternalCallError by a phase whose steps all
halt it on the first failure.
"""

from typing import Optional

from common.phase_models import ExternalCallResult


class InstallerError(Exception):
    """Base class for every error raised by the installer."""


class EnvironmentCheckError(InstallerError):
    """The machine cannot be provisioned as it stands."""


class DistributionUnsupportedError(EnvironmentCheckError):
    """The distribution is not supported, or the user declined an untested version."""


class MissingDependencyError(EnvironmentCheckError):
    """A required external command is not available."""

    def __init__(self, command_name: str, message: Optional[str] = None):
        self.command_name = command_name
        super().__init__(
            message or f"Required command '{command_name}' was not found in PATH."
        )


class PrivilegeError(EnvironmentCheckError):
    """The process cannot elevate its privileges."""


class ExternalCallError(InstallerError):
    """A wrapped command returned a non-zero status."""

    def __init__(
        self,
        result: ExternalCallResult,
        remediation: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.result = result
        self.remediation = remediation
        super().__init__(
            message
            or f"{result.description} failed (rc {result.returncode}): {result.command_str}"
        )


class UserDeclinedError(InstallerError):
    """The operator declined a confirmation gate. Reported as a skipped phase."""
