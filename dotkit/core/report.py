"""
Result types for non-fatal provisioning steps.
"""

import enum
from dataclasses import dataclass


class StepStatus(enum.Enum):
    """Terminal status of a best-effort step."""

    OK = "ok"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StepResult:
    """
    Outcome of a best-effort provisioning step.

    Attributes:
        name: Step name shown in the run summary
        status: Terminal status
        message: Human-readable detail
        hint: Optional remediation hint for failures
    """

    name: str
    status: StepStatus
    message: str = ""
    hint: str = ""

    @property
    def ok(self) -> bool:
        return self.status is StepStatus.OK

    @classmethod
    def success(cls, name: str, message: str = "") -> "StepResult":
        return cls(name, StepStatus.OK, message)

    @classmethod
    def skipped(cls, name: str, message: str) -> "StepResult":
        return cls(name, StepStatus.SKIPPED, message)

    @classmethod
    def failed(cls, name: str, message: str, hint: str = "") -> "StepResult":
        return cls(name, StepStatus.FAILED, message, hint)
