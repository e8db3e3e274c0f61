"""
Shared utilities for CLI commands.

Console output helpers and the end-of-run summary.
"""

import logging
import sys
from typing import Optional

from dotkit.core.report import StepStatus
from dotkit.provisioner import ProvisionReport
from dotkit.tools.orchestrator import InstallOutcome

logger = logging.getLogger(__name__)


# ============================================================================
# Output Formatting
# ============================================================================

_OUTCOME_MARKS = {
    InstallOutcome.ALREADY_PRESENT: "✓",
    InstallOutcome.INSTALLED: "✅",
    InstallOutcome.SKIPPED: "⏭️",
    InstallOutcome.FAILED: "❌",
}

_STEP_MARKS = {
    StepStatus.OK: "✅",
    StepStatus.SKIPPED: "⏭️",
    StepStatus.FAILED: "⚠️",
}


def format_summary(report: ProvisionReport, width: int = 70) -> str:
    """
    Format the end-of-run summary.

    Args:
        report: Completed provisioning report
        width: Width of the header rule

    Returns:
        Formatted summary string
    """
    lines = []
    lines.append("=" * width)
    lines.append("dotkit bootstrap summary")
    lines.append("=" * width)
    lines.append("")

    lines.append(f"Platform: {report.platform}")
    lines.append(f"Package manager: {report.ecosystem or 'none'}")
    if report.config_tool is not None:
        lines.append(f"chezmoi: {report.config_tool.summary()}")
    if report.target is not None:
        lines.append(f"Configuration: {report.target}")

    if report.tools.results:
        lines.append("")
        lines.append("Tools:")
        for result in report.tools.results:
            mark = _OUTCOME_MARKS[result.outcome]
            lines.append(f"  {mark} {result.name}: {result.summary()}")

    if report.steps:
        lines.append("")
        lines.append("Steps:")
        for step in report.steps:
            detail = f": {step.message}" if step.message else ""
            lines.append(f"  {_STEP_MARKS[step.status]} {step.name}{detail}")
            if step.hint:
                lines.append(f"     💡 {step.hint}")

    counts = report.tools.counts()
    lines.append("")
    if report.tools.installed:
        names = ", ".join(r.name for r in report.tools.installed)
        lines.append(f"Newly installed: {names}")
    lines.append(
        f"📊 {counts['installed']} installed, {counts['present']} already present, "
        f"{counts['skipped']} skipped, {counts['failed']} failed"
    )
    lines.append("")
    return "\n".join(lines)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        for line in details.splitlines():
            print(f"  {line}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for limited consoles.

    Falls back to ASCII-safe characters if Unicode emojis can't be encoded.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = (
            message.replace("⚠️", "WARNING:")
            .replace("⏭️", "[SKIP]")
            .replace("✓", "[OK]")
            .replace("✅", "[OK]")
            .replace("❌", "[ERROR]")
            .replace("💡", "Hint:")
            .replace("📊", "")
            .replace("🩺", "")
        )
        print(safe_message.encode("ascii", "replace").decode("ascii"), file=file)
