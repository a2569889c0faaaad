# common/external_installer.py
# -*- coding: utf-8 -*-
"""
Uniform wrapper for invoking package managers, driver tooling and build scripts.

The wrapper runs one command synchronously, lets its output pass through to
the terminal and reports the exit status. It never retries and never decides
whether a failure matters: that is the caller's policy.
"""

import logging
import os
from typing import Dict, Optional, Sequence, Union

from common.command_utils import log_installer, run_command, run_elevated_command
from common.phase_models import ExternalCallResult
from tt_installer.config_models import AppSettings
from tt_installer.errors import ExternalCallError

module_logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND_RC = 127


class ExternalInstaller:
    """Runs external commands on behalf of the phases."""

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or module_logger

    def run(
        self,
        description: str,
        command: Sequence[str],
        elevated: bool = False,
        cwd: Optional[Union[str, os.PathLike]] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> ExternalCallResult:
        """
        Runs `command` and returns its ExternalCallResult.

        Args:
            description: Human-readable name of the step, used in logs and errors.
            command: The command as a list of arguments.
            elevated: Run through sudo when the process is not root.
            cwd: Working directory.
            env: Variables added to the inherited environment.
        """
        symbols = self.app_settings.symbols
        log_installer(
            f"{symbols.get('step', '➡️')} {description}",
            "info",
            self.logger,
            self.app_settings,
        )
        cwd_str = str(cwd) if cwd is not None else None
        try:
            if elevated:
                completed = run_elevated_command(
                    list(command),
                    self.app_settings,
                    check=False,
                    current_logger=self.logger,
                    cwd=cwd_str,
                    env=env,
                )
            else:
                completed = run_command(
                    list(command),
                    self.app_settings,
                    check=False,
                    current_logger=self.logger,
                    cwd=cwd_str,
                    env={**os.environ, **env} if env else None,
                )
            returncode = completed.returncode
        except FileNotFoundError:
            returncode = COMMAND_NOT_FOUND_RC
        except OSError as e:
            log_installer(
                f"{symbols.get('error', '❌')} Could not start '{description}': {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            returncode = COMMAND_NOT_FOUND_RC

        result = ExternalCallResult(
            description=description,
            command=tuple(command),
            returncode=returncode,
        )
        if not result.ok:
            log_installer(
                f"{symbols.get('error', '❌')} {description} failed (rc {returncode}).",
                "error",
                self.logger,
                self.app_settings,
            )
        return result

    def run_checked(
        self,
        description: str,
        command: Sequence[str],
        elevated: bool = False,
        cwd: Optional[Union[str, os.PathLike]] = None,
        env: Optional[Dict[str, str]] = None,
        remediation: Optional[str] = None,
    ) -> ExternalCallResult:
        """
        Like run(), but raises ExternalCallError on a non-zero status. The
        sequencer reports the error with `remediation` as its hint.
        """
        result = self.run(description, command, elevated=elevated, cwd=cwd, env=env)
        if not result.ok:
            raise ExternalCallError(result, remediation)
        return result

    def pip_install(self, description: str, requirement: str) -> ExternalCallResult:
        """System-wide 'pip3 install' of a requirement (e.g. 'git+https://...')."""
        return self.run(
            description,
            ["pip3", "install", requirement],
            elevated=True,
        )
