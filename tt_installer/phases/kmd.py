# tt_installer/phases/kmd.py
# -*- coding: utf-8 -*-
"""
Builds the TT-KMD kernel driver through DKMS and loads it.
"""

from common.command_utils import log_installer
from common.file_utils import make_temp_dir, remove_path
from common.phase_models import PhaseContext, PhaseOutcome

KMD_TEMP_DIR_PREFIX = "tt-kmd-install-"


def install_kmd(ctx: PhaseContext) -> PhaseOutcome:
    """
    Clone TT-KMD into a temporary directory, then 'dkms add', 'dkms install'
    and 'modprobe'. The clone is removed afterwards, also on failure.

    The first failing step raises ExternalCallError carrying its hint.
    """
    app_settings = ctx.app_settings
    kmd = app_settings.kmd
    symbols = app_settings.symbols

    clone_dir = make_temp_dir(KMD_TEMP_DIR_PREFIX)
    steps = [
        (
            "Cloning TT-KMD repository",
            ["git", "clone", "--depth", "1", kmd.repo, str(clone_dir)],
            False,
            f"Check network access to {kmd.repo}.",
        ),
        (
            "Adding TT-KMD module to DKMS",
            ["dkms", "add", "."],
            True,
            f"If {kmd.module_name}/{kmd.version} is already registered, remove it with "
            f"'sudo dkms remove {kmd.module_name}/{kmd.version} --all' and re-run.",
        ),
        (
            f"Building and installing TT-KMD module via DKMS (version {kmd.version})",
            ["dkms", "install", f"{kmd.module_name}/{kmd.version}"],
            True,
            "Check the version and the DKMS build logs under /var/lib/dkms.",
        ),
        (
            "Loading TT-KMD module",
            ["modprobe", kmd.module_name],
            True,
            "Check dmesg for errors.",
        ),
    ]
    try:
        for description, command, elevated, remediation in steps:
            ctx.installer.run_checked(
                description,
                command,
                elevated=elevated,
                cwd=clone_dir,
                remediation=remediation,
            )
    finally:
        remove_path(clone_dir, app_settings, ctx.logger)

    log_installer(
        f"{symbols.get('success', '✅')} TT-KMD installed and loaded successfully.",
        "success",
        ctx.logger,
        app_settings,
    )
    return PhaseOutcome.success(f"TT-KMD {kmd.version} installed and loaded.")
