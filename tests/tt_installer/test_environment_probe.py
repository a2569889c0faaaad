# tests/tt_installer/test_environment_probe.py
# -*- coding: utf-8 -*-
"""
Tests for the distribution, privilege and tool checks.
"""

import subprocess
from unittest.mock import MagicMock

import pytest

from tt_installer.config_models import AppSettings
from tt_installer.environment_probe import (
    check_privileges,
    probe_environment,
    read_distribution,
    require_commands,
)
from tt_installer.errors import (
    DistributionUnsupportedError,
    MissingDependencyError,
    PrivilegeError,
)


def _lsb(tmp_path, dist_id, release, codename="jammy"):
    path = tmp_path / "lsb-release"
    path.write_text(
        f"DISTRIB_ID={dist_id}\n"
        f"DISTRIB_RELEASE={release}\n"
        f"DISTRIB_CODENAME={codename}\n"
        f'DISTRIB_DESCRIPTION="{dist_id} {release} LTS"\n',
        encoding="utf-8",
    )
    return path


@pytest.fixture
def root_with_tools(mocker):
    """Running as root with every tool on PATH."""
    mocker.patch("tt_installer.environment_probe.is_root", return_value=True)
    mocker.patch("tt_installer.environment_probe.command_exists", return_value=True)
    return mocker.patch("tt_installer.environment_probe.run_command")


def test_read_distribution_from_lsb_release(tmp_path):
    lsb = _lsb(tmp_path, "Ubuntu", "22.04")

    assert read_distribution(lsb, tmp_path / "none") == ("Ubuntu", "22.04", "jammy")


def test_read_distribution_falls_back_to_os_release(tmp_path):
    os_release = tmp_path / "os-release"
    os_release.write_text(
        'NAME="Ubuntu"\nID=ubuntu\nVERSION_ID="24.04"\nVERSION_CODENAME=noble\n',
        encoding="utf-8",
    )

    assert read_distribution(tmp_path / "none", os_release) == (
        "Ubuntu",
        "24.04",
        "noble",
    )


def test_read_distribution_without_files(tmp_path):
    with pytest.raises(DistributionUnsupportedError):
        read_distribution(tmp_path / "none", tmp_path / "also-none")


def test_undecodable_release_file_is_unsupported(tmp_path):
    lsb = tmp_path / "lsb-release"
    lsb.write_bytes(b"\xff\xfeDISTRIB_ID=Ubuntu\n")

    with pytest.raises(DistributionUnsupportedError) as excinfo:
        read_distribution(lsb, tmp_path / "none")

    assert str(lsb) in str(excinfo.value)


def test_supported_ubuntu_passes_silently(tmp_path, app_settings, mock_logger, root_with_tools):
    confirm = MagicMock()

    facts = probe_environment(
        app_settings, confirm, mock_logger, _lsb(tmp_path, "Ubuntu", "22.04"), tmp_path / "none"
    )

    confirm.assert_not_called()
    assert facts.distribution_id == "Ubuntu"
    assert facts.distribution_version == "22.04"
    assert facts.supported_version is True
    assert facts.is_root is True
    assert facts.missing_commands == []


def test_debian_is_rejected_before_any_call(tmp_path, app_settings, mock_logger, root_with_tools):
    confirm = MagicMock()

    with pytest.raises(DistributionUnsupportedError):
        probe_environment(
            app_settings, confirm, mock_logger, _lsb(tmp_path, "Debian", "12"), tmp_path / "none"
        )

    confirm.assert_not_called()
    root_with_tools.assert_not_called()


@pytest.mark.parametrize("version", ["20.04", "24.04"])
def test_other_ubuntu_version_prompts_and_proceeds(
    tmp_path, app_settings, mock_logger, root_with_tools, version
):
    confirm = MagicMock(return_value=True)

    facts = probe_environment(
        app_settings, confirm, mock_logger, _lsb(tmp_path, "Ubuntu", version), tmp_path / "none"
    )

    confirm.assert_called_once_with("Do you want to attempt installation anyway?")
    assert facts.supported_version is False


def test_other_ubuntu_version_declined(tmp_path, app_settings, mock_logger, root_with_tools):
    confirm = MagicMock(return_value=False)

    with pytest.raises(DistributionUnsupportedError, match="aborted by user"):
        probe_environment(
            app_settings, confirm, mock_logger, _lsb(tmp_path, "Ubuntu", "24.04"), tmp_path / "none"
        )


def test_configured_supported_versions(tmp_path, mock_logger, root_with_tools):
    settings = AppSettings(supported_versions=["22.04", "24.04"])
    confirm = MagicMock()

    probe_environment(
        settings, confirm, mock_logger, _lsb(tmp_path, "Ubuntu", "24.04"), tmp_path / "none"
    )

    confirm.assert_not_called()


def test_check_privileges_non_root_validates_sudo(mocker, app_settings, mock_logger):
    mocker.patch("tt_installer.environment_probe.is_root", return_value=False)
    mocker.patch("tt_installer.environment_probe.command_exists", return_value=True)
    run_command = mocker.patch("tt_installer.environment_probe.run_command")

    assert check_privileges(app_settings, mock_logger) == (False, True)
    assert run_command.call_args[0][0] == ["sudo", "-v"]


def test_check_privileges_sudo_refused(mocker, app_settings, mock_logger):
    mocker.patch("tt_installer.environment_probe.is_root", return_value=False)
    mocker.patch("tt_installer.environment_probe.command_exists", return_value=True)
    mocker.patch(
        "tt_installer.environment_probe.run_command",
        side_effect=subprocess.CalledProcessError(1, ["sudo", "-v"]),
    )

    with pytest.raises(PrivilegeError):
        check_privileges(app_settings, mock_logger)


def test_check_privileges_without_sudo(mocker, app_settings, mock_logger):
    mocker.patch("tt_installer.environment_probe.is_root", return_value=False)
    mocker.patch("tt_installer.environment_probe.command_exists", return_value=False)

    with pytest.raises(PrivilegeError):
        check_privileges(app_settings, mock_logger)


def test_require_commands_names_first_missing(mocker):
    mocker.patch(
        "tt_installer.environment_probe.command_exists",
        side_effect=lambda name: name not in ("pip3", "cargo"),
    )

    with pytest.raises(MissingDependencyError) as excinfo:
        require_commands(["wget", "git", "pip3", "cargo"])

    assert excinfo.value.command_name == "pip3"


def test_missing_tools_are_recorded_when_prerequisites_will_run(
    mocker, tmp_path, app_settings, mock_logger
):
    mocker.patch("tt_installer.environment_probe.is_root", return_value=True)
    mocker.patch(
        "tt_installer.environment_probe.command_exists",
        side_effect=lambda name: name != "cargo",
    )

    facts = probe_environment(
        app_settings, MagicMock(), mock_logger, _lsb(tmp_path, "Ubuntu", "22.04"), tmp_path / "none"
    )

    assert facts.missing_commands == ["cargo"]


def test_missing_tools_fail_with_skip_prerequisites(mocker, tmp_path, mock_logger):
    mocker.patch("tt_installer.environment_probe.is_root", return_value=True)
    mocker.patch(
        "tt_installer.environment_probe.command_exists",
        side_effect=lambda name: name != "cargo",
    )
    settings = AppSettings(skip_prerequisites=True)

    with pytest.raises(MissingDependencyError) as excinfo:
        probe_environment(
            settings, MagicMock(), mock_logger, _lsb(tmp_path, "Ubuntu", "22.04"), tmp_path / "none"
        )

    assert excinfo.value.command_name == "cargo"
