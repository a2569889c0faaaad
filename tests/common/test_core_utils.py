import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from common.core_utils import SymbolFormatter, resolve_log_level, setup_logging


@pytest.fixture
def mock_root_logger(mocker):
    """Fixture to mock the root logger. Named loggers stay real."""
    mock_logger = MagicMock()
    mock_logger.handlers = []
    real_get_logger = logging.getLogger

    def _get_logger(name=None):
        return mock_logger if name is None else real_get_logger(name)

    mocker.patch("common.core_utils.logging.getLogger", side_effect=_get_logger)
    return mock_logger


def _added_handlers(root_logger):
    # pytest's own capture handlers are added to the root logger as well
    return [c.args[0] for c in root_logger.addHandler.call_args_list]


def test_setup_logging_with_file_and_console(mocker, mock_root_logger, tmp_path):
    """Test setup_logging when both log_file and log_to_console are provided."""
    mock_file_handler = mocker.patch("logging.FileHandler")
    mock_stream_handler = mocker.patch("logging.StreamHandler")
    mock_formatter = mocker.patch("common.core_utils.SymbolFormatter")

    log_file_path = str(tmp_path / "logs" / "install.log")

    setup_logging(log_file=log_file_path, log_to_console=True)

    mock_file_handler.assert_called_once_with(Path(log_file_path), mode="a")
    mock_stream_handler.assert_called_once_with(sys.stderr)
    assert mock_formatter.call_count == 1
    added = _added_handlers(mock_root_logger)
    assert added.count(mock_file_handler.return_value) == 1
    assert added.count(mock_stream_handler.return_value) == 1
    assert (tmp_path / "logs").is_dir()


def test_setup_logging_without_handlers(mocker, mock_root_logger):
    """Test setup_logging when no handlers are provided."""
    mock_stream_handler = mocker.patch("logging.StreamHandler")
    mocker.patch("common.core_utils.SymbolFormatter")

    setup_logging(log_to_console=False, log_file=None)

    mock_stream_handler.assert_called_once_with(sys.stderr)
    assert _added_handlers(mock_root_logger).count(
        mock_stream_handler.return_value
    ) == 1


def test_setup_logging_with_custom_format(mocker, mock_root_logger):
    """Test setup_logging with a custom log format."""
    mock_formatter = mocker.patch("common.core_utils.SymbolFormatter")

    custom_format = "{log_prefix}%(asctime)s - %(levelname)s - %(message)s"
    custom_prefix = "[TestPrefix]"

    setup_logging(log_format_str=custom_format, log_prefix=custom_prefix)

    expected_format = custom_format.format(log_prefix=custom_prefix + " ")
    mock_formatter.assert_called_once_with(
        fmt=expected_format,
        datefmt="%Y-%m-%d %H:%M:%S",
        symbols=None,
    )


def test_setup_logging_sets_level(mock_root_logger):
    setup_logging(log_level=logging.DEBUG)

    mock_root_logger.setLevel.assert_any_call(logging.DEBUG)


def test_symbol_formatter_adds_level_symbol():
    formatter = SymbolFormatter(
        fmt="%(symbol)s %(message)s", symbols={"warning": "W!"}
    )
    record = logging.LogRecord(
        "test", logging.WARNING, __file__, 1, "careful", None, None
    )

    assert formatter.format(record) == "W! careful"


def test_symbol_formatter_falls_back_to_defaults():
    formatter = SymbolFormatter(fmt="%(symbol)s %(message)s")
    record = logging.LogRecord("test", logging.ERROR, __file__, 1, "bad", None, None)

    assert formatter.format(record) == "❌ bad"


def test_resolve_log_level(monkeypatch):
    monkeypatch.setenv("LOGLEVEL", "warning")
    assert resolve_log_level() == logging.WARNING
    assert resolve_log_level(verbose=True) == logging.DEBUG

    monkeypatch.setenv("LOGLEVEL", "chatty")
    assert resolve_log_level() == logging.INFO

    monkeypatch.delenv("LOGLEVEL")
    assert resolve_log_level() == logging.INFO
