# common/phase_models.py
# -*- coding: utf-8 -*-
"""
Data model shared by the phase sequencer and the phase implementations.

Every model is immutable. A run builds an InstallPlan once, executes it and
reports a RunSummary; nothing here is persisted.
"""

import subprocess
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PhaseStatus(str, Enum):
    """Lifecycle of a single phase."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class FailurePolicy(str, Enum):
    """What a failed phase does to the rest of the run."""

    FATAL = "fatal"
    WARN = "warn"


class ExternalCallResult(BaseModel):
    """Outcome of one external command."""

    model_config = ConfigDict(frozen=True)

    description: str
    command: Tuple[str, ...]
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_str(self) -> str:
        return subprocess.list2cmdline(list(self.command))


class PhaseOutcome(BaseModel):
    """Value returned by a phase function."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    message: str = ""
    remediation: Optional[str] = None

    @classmethod
    def success(cls, message: str = "") -> "PhaseOutcome":
        return cls(ok=True, message=message)

    @classmethod
    def failure(
        cls, message: str, remediation: Optional[str] = None
    ) -> "PhaseOutcome":
        return cls(ok=False, message=message, remediation=remediation)

    @classmethod
    def from_call(
        cls, result: ExternalCallResult, remediation: Optional[str] = None
    ) -> "PhaseOutcome":
        """Success or failure mirroring a single external call."""
        if result.ok:
            return cls.success(f"{result.description}: done.")
        return cls.failure(
            f"{result.description} failed (rc {result.returncode}): {result.command_str}",
            remediation,
        )


class PhaseContext(BaseModel):
    """
    Everything a phase function may touch.

    `state` is the run-wide scratch dictionary (for example the firmware
    download phase leaves the bundle path there for the flash phase).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    app_settings: Any
    installer: Any
    logger: Any
    state: Dict[str, Any] = Field(default_factory=dict)


class PhaseSpec(BaseModel):
    """Static description of one phase of the plan."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    description: str
    func: Callable[[PhaseContext], PhaseOutcome]
    policy: FailurePolicy = FailurePolicy.FATAL
    optional: bool = False
    confirm_prompt: Optional[str] = None
    enabled: bool = True
    reboot_after: Optional[str] = None

    @property
    def fatal(self) -> bool:
        return self.policy == FailurePolicy.FATAL


class InstallPlan(BaseModel):
    """Ordered, immutable list of phases."""

    model_config = ConfigDict(frozen=True)

    phases: Tuple[PhaseSpec, ...]

    @field_validator("phases")
    @classmethod
    def _unique_names(cls, phases: Tuple[PhaseSpec, ...]) -> Tuple[PhaseSpec, ...]:
        seen = set()
        for phase in phases:
            if phase.name in seen:
                raise ValueError(f"Duplicate phase name '{phase.name}' in plan")
            seen.add(phase.name)
        return phases

    @property
    def names(self) -> List[str]:
        return [phase.name for phase in self.phases]


class PhaseResult(BaseModel):
    """Recorded outcome of one phase after (or instead of) running it."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    status: PhaseStatus
    optional: bool = False
    policy: FailurePolicy = FailurePolicy.FATAL
    message: str = ""
    remediation: Optional[str] = None


class RunSummary(BaseModel):
    """Per-phase outcomes of a run, in plan order."""

    model_config = ConfigDict(frozen=True)

    results: Tuple[PhaseResult, ...]
    halted: bool = False
    halted_at: Optional[str] = None
    halt_reason: Optional[str] = None

    @property
    def exit_code(self) -> int:
        return 1 if self.halted else 0

    @property
    def performed_optional(self) -> List[str]:
        return [
            r.name
            for r in self.results
            if r.optional and r.status == PhaseStatus.SUCCEEDED
        ]

    def status_of(self, name: str) -> PhaseStatus:
        for result in self.results:
            if result.name == name:
                return result.status
        raise KeyError(f"No phase named '{name}' in this run")
