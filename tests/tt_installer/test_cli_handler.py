# tests/tt_installer/test_cli_handler.py
# -*- coding: utf-8 -*-
"""
Tests for confirmation gates, reboot checkpoints and the configuration view.
"""

import pytest

from tt_installer.cli_handler import (
    cli_confirm,
    cli_wait_for_reboot_ack,
    view_configuration,
)
from tt_installer.config_models import AppSettings


@pytest.mark.parametrize(
    "answer, expected",
    [
        ("y", True),
        ("Y", True),
        ("yes", True),
        (" YES ", True),
        ("n", False),
        ("", False),
        ("yep", False),
    ],
)
def test_cli_confirm_answers(mocker, app_settings, mock_logger, answer, expected):
    mocker.patch("builtins.input", return_value=answer)

    assert cli_confirm("Install TT-Topology?", app_settings, mock_logger) is expected


def test_cli_confirm_eof_means_no(mocker, app_settings, mock_logger):
    mocker.patch("builtins.input", side_effect=EOFError)

    assert cli_confirm("Install?", app_settings, mock_logger) is False
    mock_logger.warning.assert_called_once()


def test_cli_confirm_assume_yes_does_not_prompt(mocker, mock_logger):
    input_mock = mocker.patch("builtins.input")

    assert cli_confirm("Install?", AppSettings(assume_yes=True), mock_logger) is True
    input_mock.assert_not_called()


def test_reboot_ack_waits_for_enter(mocker, app_settings, mock_logger):
    input_mock = mocker.patch("builtins.input", return_value="")

    assert cli_wait_for_reboot_ack("Reboot required.", app_settings, mock_logger) is True
    input_mock.assert_called_once()


def test_reboot_ack_ignores_assume_yes(mocker, mock_logger):
    input_mock = mocker.patch("builtins.input", return_value="")

    cli_wait_for_reboot_ack("Reboot required.", AppSettings(assume_yes=True), mock_logger)

    input_mock.assert_called_once()


def test_reboot_ack_eof_is_not_acknowledged(mocker, app_settings, mock_logger):
    mocker.patch("builtins.input", side_effect=EOFError)

    assert cli_wait_for_reboot_ack("Reboot required.", app_settings, mock_logger) is False


def test_view_configuration(app_settings, mock_logger):
    view_configuration(app_settings, mock_logger)

    logged = "".join(str(call.args[0]) for call in mock_logger.info.call_args_list)
    assert "wormhole_b0" in logged
    assert "fw_pack-80.15.0.0.fwbundle" in logged
    assert "tenstorrent-tools_1.1-5_all.deb" in logged
    assert "TT-Buda" in logged
