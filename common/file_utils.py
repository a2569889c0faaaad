# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions for temporary download and clone locations.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from tt_installer.config_models import (
    SYMBOLS_DEFAULT,
    AppSettings,
)

from .command_utils import log_installer

module_logger = logging.getLogger(__name__)


def make_temp_file(prefix: str, suffix: str = "") -> Path:
    """
    Create an empty temporary file named <prefix><random><suffix> and return
    its path. The caller removes it with remove_path().
    """
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix)
    os.close(fd)
    return Path(name)


def make_temp_dir(prefix: str) -> Path:
    """Create a temporary directory named <prefix><random>."""
    return Path(tempfile.mkdtemp(prefix=prefix))


def remove_path(
    path: Optional[Path],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Removes a temporary file or directory tree.

    Parameters:
        path (Optional[Path]): What to remove. None and missing paths are a
            no-op.
        app_settings (Optional[AppSettings]): Settings providing log symbols.
        current_logger (Optional[logging.Logger]): Logger instance to use.

    Returns:
        bool: False if the path existed and could not be removed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )

    if path is None or not path.exists():
        log_installer(
            f"Nothing to clean up at {path}.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return True

    try:
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        log_installer(
            f"{symbols.get('warning', '⚠️')} Could not remove temporary path {path}: {e}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False

    log_installer(
        f"Removed temporary path: {path}",
        "debug",
        logger_to_use,
        app_settings,
    )
    return True
