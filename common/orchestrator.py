# common/orchestrator.py
# -*- coding: utf-8 -*-
"""
Centralized orchestrator for executing an install plan phase by phase.

Each phase moves PENDING -> RUNNING -> {SUCCEEDED, FAILED, SKIPPED}. A failed
fatal phase, or a reboot checkpoint that is not acknowledged, halts the run and
every later phase stays PENDING.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from common.phase_models import (
    InstallPlan,
    PhaseContext,
    PhaseOutcome,
    PhaseResult,
    PhaseSpec,
    PhaseStatus,
    RunSummary,
)
from tt_installer.config_models import SYMBOLS_DEFAULT
from tt_installer.errors import InstallerError, UserDeclinedError

DECLINED_MESSAGE = "Declined by user."


class Orchestrator:
    """Runs the phases of an InstallPlan in order."""

    def __init__(
        self,
        app_settings: Any,
        confirm: Callable[[str], bool],
        acknowledge_reboot: Callable[[str], bool],
        installer: Any = None,
        orchestrator_logger: Optional[logging.Logger] = None,
    ):
        """
        Initializes the Orchestrator.

        Args:
            app_settings: The application settings object.
            confirm: Asks a y/N question; True means proceed.
            acknowledge_reboot: Blocks until the operator acknowledges a
                reboot checkpoint; False means it was not acknowledged.
            installer: The ExternalInstaller handed to every phase.
            orchestrator_logger: An optional logger instance.
        """
        self.app_settings = app_settings
        self.confirm = confirm
        self.acknowledge_reboot = acknowledge_reboot
        self.installer = installer
        self.logger = orchestrator_logger or logging.getLogger(__name__)
        # Shared state for phases to pass values between each other
        self.context: Dict[str, Any] = {}
        self.statuses: Dict[str, PhaseStatus] = {}

    @property
    def symbols(self) -> Dict[str, str]:
        symbols = getattr(self.app_settings, "symbols", None)
        return symbols or SYMBOLS_DEFAULT

    def _transition(self, phase: PhaseSpec, status: PhaseStatus) -> None:
        self.logger.debug(
            f"Phase '{phase.name}': {self.statuses.get(phase.name, PhaseStatus.PENDING).value} -> {status.value}"
        )
        self.statuses[phase.name] = status

    def _result(
        self,
        phase: PhaseSpec,
        message: str = "",
        remediation: Optional[str] = None,
    ) -> PhaseResult:
        return PhaseResult(
            name=phase.name,
            description=phase.description,
            status=self.statuses[phase.name],
            optional=phase.optional,
            policy=phase.policy,
            message=message,
            remediation=remediation,
        )

    def _execute(self, phase: PhaseSpec, ctx: PhaseContext) -> PhaseOutcome:
        """
        Asks the phase's confirmation gate, calls the phase body and converts
        exceptions into outcomes.

        Raises:
            UserDeclinedError: The gate was declined, or the body declined.
        """
        if phase.confirm_prompt and not self.confirm(phase.confirm_prompt):
            raise UserDeclinedError(DECLINED_MESSAGE)
        try:
            outcome = phase.func(ctx)
        except UserDeclinedError:
            raise
        except InstallerError as e:
            return PhaseOutcome.failure(str(e), getattr(e, "remediation", None))
        except Exception as e:
            self.logger.critical(
                f"{self.symbols.get('critical', '🔥')} Phase '{phase.name}' raised an unexpected error: {e}",
                exc_info=True,
            )
            return PhaseOutcome.failure(f"Unexpected error: {e}")
        if outcome is None:
            return PhaseOutcome.success()
        return outcome

    def run(self, plan: InstallPlan) -> RunSummary:
        """
        Executes the plan.

        Returns:
            A RunSummary with one PhaseResult per phase, in plan order.
        """
        symbols = self.symbols
        self.statuses = {phase.name: PhaseStatus.PENDING for phase in plan.phases}
        results: Dict[str, PhaseResult] = {}
        halted_at: Optional[str] = None
        halt_reason: Optional[str] = None

        # One context for the whole run. Pydantic copies `state` on
        # validation, so the model's dict becomes the shared one.
        ctx = PhaseContext(
            app_settings=self.app_settings,
            installer=self.installer,
            logger=self.logger,
            state=self.context,
        )
        self.context = ctx.state

        self.logger.info("Orchestration started.")
        for i, phase in enumerate(plan.phases):
            if not phase.enabled:
                self._transition(phase, PhaseStatus.SKIPPED)
                results[phase.name] = self._result(phase, "Disabled by configuration.")
                self.logger.info(
                    f"{symbols.get('skip', '⏭️')} Phase '{phase.name}' is disabled. Skipping."
                )
                continue

            self.logger.info(
                f"--- Stage {i + 1}: {phase.description} ({phase.name}) ---"
            )
            self._transition(phase, PhaseStatus.RUNNING)

            try:
                outcome = self._execute(phase, ctx)
            except UserDeclinedError as e:
                self._transition(phase, PhaseStatus.SKIPPED)
                results[phase.name] = self._result(phase, str(e) or DECLINED_MESSAGE)
                self.logger.info(
                    f"{symbols.get('skip', '⏭️')} Skipping '{phase.name}'."
                )
                continue

            if outcome.ok:
                self._transition(phase, PhaseStatus.SUCCEEDED)
                results[phase.name] = self._result(phase, outcome.message)
                self.logger.info(
                    f"{symbols.get('success', '✅')} Phase '{phase.name}' completed successfully."
                )
                if phase.reboot_after and not self.acknowledge_reboot(
                    phase.reboot_after
                ):
                    halted_at = phase.name
                    halt_reason = (
                        "Reboot checkpoint was not acknowledged. Reboot the "
                        "machine, then run the installer again."
                    )
                    self.logger.error(f"{symbols.get('reboot', '🔄')} {halt_reason}")
                    break
                continue

            self._transition(phase, PhaseStatus.FAILED)
            results[phase.name] = self._result(
                phase, outcome.message, outcome.remediation
            )
            self.logger.error(
                f"{symbols.get('error', '❌')} Phase '{phase.name}' failed: {outcome.message}"
            )
            if outcome.remediation:
                self.logger.error(f"   Hint: {outcome.remediation}")
            if phase.fatal:
                halted_at = phase.name
                halt_reason = f"Fatal failure in '{phase.name}': {outcome.message}"
                self.logger.error(
                    "A fatal error occurred. Halting orchestration."
                )
                break
            self.logger.warning(
                f"{symbols.get('warning', '⚠️')} Phase '{phase.name}' is non-fatal. Continuing orchestration."
            )

        ordered: List[PhaseResult] = []
        for phase in plan.phases:
            if phase.name in results:
                ordered.append(results[phase.name])
            else:
                ordered.append(self._result(phase))

        if halted_at is None:
            self.logger.info(
                f"{symbols.get('sparkles', '✨')} Orchestration finished."
            )
        return RunSummary(
            results=tuple(ordered),
            halted=halted_at is not None,
            halted_at=halted_at,
            halt_reason=halt_reason,
        )
