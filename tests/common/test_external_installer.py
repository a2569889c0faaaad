import os
import subprocess

import pytest

from common.external_installer import COMMAND_NOT_FOUND_RC, ExternalInstaller
from tt_installer.errors import ExternalCallError


@pytest.fixture
def installer(app_settings, mock_logger):
    return ExternalInstaller(app_settings, mock_logger)


def _completed(returncode):
    return subprocess.CompletedProcess(args=[], returncode=returncode)


def test_run_success(mocker, installer, app_settings, mock_logger):
    run_command = mocker.patch(
        "common.external_installer.run_command", return_value=_completed(0)
    )

    result = installer.run("Cloning TT-KMD", ["git", "clone", "repo"], cwd="/tmp/x")

    assert result.ok
    assert result.command == ("git", "clone", "repo")
    run_command.assert_called_once_with(
        ["git", "clone", "repo"],
        app_settings,
        check=False,
        current_logger=mock_logger,
        cwd="/tmp/x",
        env=None,
    )
    mock_logger.info.assert_any_call("➡️ Cloning TT-KMD", exc_info=False)


def test_run_failure_is_returned_not_raised(mocker, installer, mock_logger):
    mocker.patch(
        "common.external_installer.run_command", return_value=_completed(3)
    )

    result = installer.run("Building", ["make"])

    assert not result.ok
    assert result.returncode == 3
    mock_logger.error.assert_called_once_with(
        "❌ Building failed (rc 3).", exc_info=False
    )


def test_run_elevated_uses_elevated_command(mocker, installer, app_settings):
    run_elevated = mocker.patch(
        "common.external_installer.run_elevated_command", return_value=_completed(0)
    )
    run_command = mocker.patch("common.external_installer.run_command")

    installer.run(
        "Loading module", ["modprobe", "tenstorrent"], elevated=True, env={"A": "1"}
    )

    run_command.assert_not_called()
    args, kwargs = run_elevated.call_args
    assert args[0] == ["modprobe", "tenstorrent"]
    assert kwargs["check"] is False
    assert kwargs["env"] == {"A": "1"}


def test_run_env_is_added_to_inherited_environment(mocker, installer):
    mocker.patch.dict(os.environ, {"HOME": "/home/tt"})
    run_command = mocker.patch(
        "common.external_installer.run_command", return_value=_completed(0)
    )

    installer.run("Building", ["make"], env={"ARCH_NAME": "wormhole_b0"})

    env = run_command.call_args[1]["env"]
    assert env["ARCH_NAME"] == "wormhole_b0"
    assert env["HOME"] == "/home/tt"


def test_missing_executable_maps_to_127(mocker, installer):
    mocker.patch(
        "common.external_installer.run_command",
        side_effect=FileNotFoundError(2, "No such file", "wget"),
    )

    result = installer.run("Downloading", ["wget", "url"])

    assert result.returncode == COMMAND_NOT_FOUND_RC
    assert not result.ok


def test_run_checked_raises(mocker, installer):
    mocker.patch(
        "common.external_installer.run_command", return_value=_completed(1)
    )

    with pytest.raises(ExternalCallError) as excinfo:
        installer.run_checked(
            "Adding module", ["dkms", "add", "."], remediation="Check dkms status."
        )

    assert excinfo.value.result.returncode == 1
    assert excinfo.value.remediation == "Check dkms status."
    assert str(excinfo.value) == "Adding module failed (rc 1): dkms add ."


def test_pip_install_is_elevated(mocker, installer):
    run_elevated = mocker.patch(
        "common.external_installer.run_elevated_command", return_value=_completed(0)
    )

    installer.pip_install("Installing TT-SMI", "git+https://example.com/tt-smi")

    assert run_elevated.call_args[0][0] == [
        "pip3",
        "install",
        "git+https://example.com/tt-smi",
    ]
