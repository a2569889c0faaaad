# tests/conftest.py
import logging
from typing import Dict, List, Optional, Sequence, Tuple
from unittest.mock import MagicMock

import pytest

from common.phase_models import ExternalCallResult
from tt_installer.config_models import AppSettings
from tt_installer.errors import ExternalCallError


class FakeInstaller:
    """
    Stands in for ExternalInstaller. Records every call and fails the ones
    whose command starts with a configured prefix.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        failures: Optional[Dict[Tuple[str, ...], int]] = None,
    ):
        self.app_settings = app_settings
        self.failures = dict(failures or {})
        self.calls: List[Dict] = []

    def run(
        self,
        description: str,
        command: Sequence[str],
        elevated: bool = False,
        cwd=None,
        env=None,
    ) -> ExternalCallResult:
        command_tuple = tuple(str(part) for part in command)
        returncode = 0
        for prefix, code in self.failures.items():
            if command_tuple[: len(prefix)] == prefix:
                returncode = code
        self.calls.append(
            {
                "description": description,
                "command": command_tuple,
                "elevated": elevated,
                "cwd": cwd,
                "env": env,
            }
        )
        return ExternalCallResult(
            description=description, command=command_tuple, returncode=returncode
        )

    def run_checked(
        self,
        description: str,
        command: Sequence[str],
        elevated: bool = False,
        cwd=None,
        env=None,
        remediation: Optional[str] = None,
    ) -> ExternalCallResult:
        result = self.run(description, command, elevated=elevated, cwd=cwd, env=env)
        if not result.ok:
            raise ExternalCallError(result, remediation)
        return result

    def pip_install(self, description: str, requirement: str) -> ExternalCallResult:
        return self.run(description, ["pip3", "install", requirement], elevated=True)

    @property
    def commands(self) -> List[Tuple[str, ...]]:
        return [call["command"] for call in self.calls]


@pytest.fixture
def app_settings(tmp_path):
    """AppSettings with the SDK install root inside the test's tmp_path."""
    return AppSettings(install_root=tmp_path / "tenstorrent")


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def fake_installer(app_settings):
    return FakeInstaller(app_settings)


@pytest.fixture
def patched_host(mocker):
    """
    Pretends apt-get exists, no package is installed yet and every freshly
    installed command is on PATH. Commands are never resolved to absolute paths.
    """
    mocker.patch("common.debian.apt_manager.command_exists", return_value=True)
    mocker.patch(
        "common.debian.apt_manager.AptManager.is_installed", return_value=False
    )
    mocker.patch("tt_installer.phases.prerequisites.require_commands")
    mocker.patch("common.system_utils.command_exists", return_value=True)
    mocker.patch("common.system_utils.shutil.which", return_value=None)


@pytest.fixture
def installer_factory():
    """Builds FakeInstallers, for code that constructs its own installer."""
    return FakeInstaller
