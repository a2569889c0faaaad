# tt_installer/main_installer.py
# -*- coding: utf-8 -*-
"""
Main entry point for the Tenstorrent stack installer.

Parses the command line, loads the configuration, probes the environment,
runs the install plan and prints the final summary. The process exit status
is 0 when the plan completes (skipped optional phases included) and 1 on a
fatal failure, an environment error or an unacknowledged reboot checkpoint.
"""

import argparse
import logging
import sys
from typing import List, Optional

from common.command_utils import log_installer
from common.core_utils import resolve_log_level
from common.core_utils import setup_logging as common_setup_logging
from common.external_installer import ExternalInstaller
from common.orchestrator import Orchestrator
from common.phase_models import PhaseStatus, RunSummary
from tt_installer import config as static_config
from tt_installer.cli_handler import (
    cli_confirm,
    cli_wait_for_reboot_ack,
    view_configuration,
)
from tt_installer.config_loader import DEFAULT_CONFIG_FILE, load_app_settings
from tt_installer.config_models import AppSettings
from tt_installer.environment_probe import probe_environment
from tt_installer.errors import EnvironmentCheckError
from tt_installer.install_plan import SDK_PHASES, build_install_plan

logger = logging.getLogger(__name__)

STATUS_SYMBOL_KEYS = {
    PhaseStatus.SUCCEEDED: "success",
    PhaseStatus.FAILED: "error",
    PhaseStatus.SKIPPED: "skip",
    PhaseStatus.PENDING: "info",
    PhaseStatus.RUNNING: "gear",
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Tenstorrent Stack Installer: kernel driver, firmware, HugePages, "
        "management tools and optional SDKs for Ubuntu.",
        epilog="Example: sudo python3 ./install.py --nobuda --arch wormhole_b0",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        add_help=False,
    )
    parser.add_argument(
        "-h",
        "--help",
        action="help",
        default=argparse.SUPPRESS,
        help="Show this help message and exit.",
    )
    parser.add_argument(
        "--nobuda",
        action="store_true",
        help="Do not offer the TT-Buda SDK phase (reported as skipped).",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Answer 'yes' to every confirmation prompt. Reboot checkpoints still wait for Enter.",
    )
    parser.add_argument(
        "--view-config",
        action="store_true",
        help="View current configuration settings and exit.",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_FILE,
        help="Path to YAML configuration file.",
    )

    config_group = parser.add_argument_group(
        "Configuration Overrides (CLI > YAML > ENV > Defaults)"
    )
    config_group.add_argument(
        "--arch",
        choices=static_config.ARCH_NAMES,
        default=None,
        help="Accelerator architecture exported as ARCH_NAME for the SDKs.",
    )
    config_group.add_argument(
        "--install-root",
        default=None,
        help="Directory the SDK repositories are cloned into (default: ~/tenstorrent).",
    )
    config_group.add_argument(
        "--force-flash",
        action="store_true",
        help="Pass --force to tt-flash (allows flashing older firmware).",
    )
    config_group.add_argument(
        "--skip-prerequisites",
        action="store_true",
        help="Do not install prerequisite packages; the required tools must already be present.",
    )
    config_group.add_argument(
        "--log-prefix",
        default=None,
        help="Prefix for log messages.",
    )

    dev_grp = parser.add_argument_group("Logging")
    dev_grp.add_argument(
        "--log-file",
        default=None,
        help="Also append log output to this file.",
    )
    dev_grp.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging.",
    )
    return parser


def print_summary(summary: RunSummary, app_settings: AppSettings) -> None:
    """Logs per-phase statuses, performed optional phases and next steps."""
    symbols = app_settings.symbols
    log_installer("--- Installation Summary ---", "info", logger, app_settings)
    for result in summary.results:
        symbol = symbols.get(STATUS_SYMBOL_KEYS.get(result.status, "info"), "")
        kind = "optional" if result.optional else "mandatory"
        line = f"  {symbol} {result.name:<18} {result.status.value:<10} ({kind}) {result.description}"
        level = "error" if result.status == PhaseStatus.FAILED else "info"
        log_installer(line, level, logger, app_settings)
        if result.status == PhaseStatus.FAILED and result.remediation:
            log_installer(
                f"      Hint: {result.remediation}", level, logger, app_settings
            )

    performed = summary.performed_optional
    log_installer(
        f"Optional phases performed: {', '.join(performed) if performed else 'none'}",
        "info",
        logger,
        app_settings,
    )

    if summary.halted:
        log_installer(
            f"{symbols.get('critical', '🔥')} Installation halted at '{summary.halted_at}'. {summary.halt_reason}",
            "critical",
            logger,
            app_settings,
        )
        return

    sdk_installed = [
        r.name
        for r in summary.results
        if r.name in SDK_PHASES and r.status == PhaseStatus.SUCCEEDED
    ]
    if sdk_installed:
        log_installer(
            "Add the SDK environment to your shell profile:",
            "info",
            logger,
            app_settings,
        )
        for key, value in app_settings.sdk_environment().items():
            log_installer(f"  export {key}={value}", "info", logger, app_settings)

    log_installer(
        f"{symbols.get('sparkles', '✨')} --- Tenstorrent Stack System Installation Complete ---",
        "info",
        logger,
        app_settings,
    )
    log_installer("IMPORTANT:", "warning", logger, app_settings)
    for note in static_config.POST_INSTALL_NOTES:
        log_installer(note, "warning", logger, app_settings)


def main_installer_entry(cli_args_list: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    parsed_cli_args = parser.parse_args(cli_args_list)

    log_level = resolve_log_level(parsed_cli_args.verbose)
    common_setup_logging(
        log_level=log_level,
        log_file=parsed_cli_args.log_file,
        log_to_console=True,
        log_prefix=static_config.LOG_PREFIX_DEFAULT,
    )

    try:
        app_settings = load_app_settings(
            parsed_cli_args, parsed_cli_args.config, logger
        )
    except SystemExit as e:
        print(
            f"CRITICAL: Failed to load or validate application configuration: {e}",
            file=sys.stderr,
        )
        return 1

    common_setup_logging(
        log_level=log_level,
        log_file=parsed_cli_args.log_file,
        log_to_console=True,
        log_prefix=app_settings.log_prefix,
        symbols=app_settings.symbols,
    )
    symbols = app_settings.symbols

    if parsed_cli_args.view_config:
        view_configuration(app_settings, logger)
        return 0

    log_installer(
        f"{symbols.get('rocket', '🚀')} Tenstorrent Stack Installer (v{static_config.SCRIPT_VERSION})",
        "info",
        logger,
        app_settings,
    )

    def confirm(prompt: str) -> bool:
        return cli_confirm(prompt, app_settings, logger)

    def acknowledge_reboot(message: str) -> bool:
        return cli_wait_for_reboot_ack(message, app_settings, logger)

    try:
        facts = probe_environment(app_settings, confirm, logger)
    except EnvironmentCheckError as e:
        log_installer(
            f"{symbols.get('critical', '🔥')} {e}",
            "critical",
            logger,
            app_settings,
        )
        return 1
    except KeyboardInterrupt:
        log_installer(
            f"{symbols.get('warning', '⚠️')} Installation interrupted before any change was made.",
            "critical",
            logger,
            app_settings,
        )
        return 1
    logger.debug(f"Environment: {facts.model_dump()}")

    installer = ExternalInstaller(app_settings, logger)
    plan = build_install_plan(app_settings)
    orchestrator = Orchestrator(
        app_settings,
        confirm=confirm,
        acknowledge_reboot=acknowledge_reboot,
        installer=installer,
        orchestrator_logger=logger,
    )
    try:
        summary = orchestrator.run(plan)
    except KeyboardInterrupt:
        log_installer(
            f"{symbols.get('warning', '⚠️')} Installation interrupted. The system may be partially modified.",
            "critical",
            logger,
            app_settings,
        )
        return 1

    print_summary(summary, app_settings)
    return summary.exit_code


def main() -> None:
    sys.exit(main_installer_entry())


if __name__ == "__main__":  # pragma: no cover
    main()
