"""
Installation orchestration engine.

Drives every ToolSpec through the same state machine:

    Probe --present--> ALREADY_PRESENT
      |
      +--> TryStrategy(0) --ok--> INSTALLED
               | fail
               v
           TryStrategy(1) ... --exhausted--> FAILED

Only strategies applicable in the current run are tried; when none apply
the tool is SKIPPED. Tools run strictly in declared order, one at a time,
and each is attempted exactly once per run. A FAILED tool never aborts the
run, except for the configuration tool's own bootstrap which is fatal.

Host state is the only memory: nothing records what a previous run did, so
the probe alone decides whether work is needed.
"""

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from dotkit.core.commands import find_command, is_available
from dotkit.core.exceptions import (
    ConfigToolBootstrapError,
    PackageManagerUnavailableError,
    RecoverableToolError,
)
from dotkit.core.platform import Platform
from dotkit.packages.base import InstallSession, PackageManagerAdapter
from dotkit.tools.strategy import StrategyContext, StrategyKind, ToolSpec

logger = logging.getLogger(__name__)


class InstallOutcome(enum.Enum):
    """Terminal state of one tool in one run."""

    ALREADY_PRESENT = "present"
    INSTALLED = "installed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ToolResult:
    """
    Per-tool entry of the run report.

    Attributes:
        name: Tool name
        outcome: Terminal state
        strategy: Kind of strategy that installed the tool (INSTALLED only)
        reason: Why the tool was skipped or failed
        attempts: Descriptions of the strategies that were tried, in order
    """

    name: str
    outcome: InstallOutcome
    strategy: Optional[StrategyKind] = None
    reason: str = ""
    attempts: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome in (InstallOutcome.ALREADY_PRESENT, InstallOutcome.INSTALLED)

    def summary(self) -> str:
        if self.outcome is InstallOutcome.INSTALLED and self.strategy:
            return f"installed via {self.strategy.value}"
        if self.reason:
            return f"{self.outcome.value}: {self.reason}"
        return self.outcome.value


@dataclass
class InstallReport:
    """Aggregated outcomes of an install run, in the order tools were processed."""

    results: List[ToolResult] = field(default_factory=list)

    def add(self, result: ToolResult) -> None:
        self.results.append(result)

    def by_outcome(self, outcome: InstallOutcome) -> List[ToolResult]:
        return [r for r in self.results if r.outcome is outcome]

    def get(self, name: str) -> Optional[ToolResult]:
        return next((r for r in self.results if r.name == name), None)

    @property
    def failed(self) -> List[ToolResult]:
        return self.by_outcome(InstallOutcome.FAILED)

    @property
    def installed(self) -> List[ToolResult]:
        return self.by_outcome(InstallOutcome.INSTALLED)

    def counts(self) -> dict:
        """Number of tools per outcome."""
        return {
            outcome.value: len(self.by_outcome(outcome)) for outcome in InstallOutcome
        }


class InstallationOrchestrator:
    """
    Idempotent, ordered, failure-tolerant tool installer.

    Example:
        orchestrator = InstallationOrchestrator(platform, adapter, bin_dir)
        orchestrator.prepare()
        orchestrator.bootstrap_config_tool(config_tool_spec(bin_dir))
        report = orchestrator.install_all(core_tool_specs(bin_dir))
    """

    def __init__(
        self,
        platform: Platform,
        adapter: Optional[PackageManagerAdapter],
        bin_dir: Optional[Path] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            platform: Detected host platform
            adapter: Package ecosystem adapter, or None if there is none
            bin_dir: User bin directory where command aliases are linked
        """
        self.platform = platform
        self.adapter = adapter
        self.bin_dir = bin_dir
        self.session = InstallSession()
        self.context = StrategyContext(platform, adapter, self.session)

    def prepare(self) -> bool:
        """
        Make the package ecosystem usable before any tool is installed.

        Failure is not fatal: the ecosystem is treated as unavailable and
        tools fall back to their other strategies.

        Returns:
            True if an ecosystem is ready
        """
        if self.adapter is None:
            logger.warning(
                f"No supported package manager for {self.platform}; "
                "only script and source installs will be attempted"
            )
            return False

        try:
            self.adapter.ensure_present(self.session)
        except PackageManagerUnavailableError as e:
            logger.warning(f"Package manager {self.adapter.name} unavailable: {e}")
            self.session.ecosystem_ready = False
            return False

        logger.debug(f"Using package manager {self.adapter.name}")
        return self.session.ecosystem_ready

    def install_tool(self, spec: ToolSpec) -> ToolResult:
        """
        Run the per-tool state machine.

        Never raises for install failures; they are captured in the result.

        Args:
            spec: Tool to provision

        Returns:
            ToolResult with the terminal outcome
        """
        if spec.is_present():
            logger.debug(f"{spec.name} already installed")
            return ToolResult(spec.name, InstallOutcome.ALREADY_PRESENT)

        attempts: List[str] = []
        errors: List[str] = []

        for strategy in spec.strategies:
            # Applicability is re-checked per strategy; earlier tools may have
            # made a toolchain available
            if not strategy.is_applicable(self.context):
                logger.debug(f"{spec.name}: {strategy.describe()} not applicable")
                continue

            description = strategy.describe()
            attempts.append(description)
            logger.info(f"Installing {spec.name} ({description})...")

            try:
                strategy.execute(self.context)
            except RecoverableToolError as e:
                logger.warning(f"{spec.name}: {description} failed: {e}")
                errors.append(f"{description}: {e}")
                continue

            if not spec.is_present():
                message = (
                    f"{description} succeeded but {spec.probe_command} "
                    "is still not on PATH"
                )
                logger.warning(f"{spec.name}: {message}")
                errors.append(message)
                continue

            self._link_alias(spec)
            logger.info(f"Installed {spec.name} via {strategy.kind.value}")
            return ToolResult(
                spec.name,
                InstallOutcome.INSTALLED,
                strategy=strategy.kind,
                attempts=attempts,
            )

        if not attempts:
            reason = f"no install strategy applies on {self.platform.family.value}"
            logger.warning(f"Skipping {spec.name}: {reason}")
            return ToolResult(spec.name, InstallOutcome.SKIPPED, reason=reason)

        reason = "; ".join(errors)
        logger.warning(f"Could not install {spec.name}")
        return ToolResult(
            spec.name, InstallOutcome.FAILED, reason=reason, attempts=attempts
        )

    def bootstrap_config_tool(self, spec: ToolSpec) -> ToolResult:
        """
        Install the configuration-application tool.

        Unlike other tools, failing here is fatal.

        Args:
            spec: The configuration tool's specification

        Returns:
            ToolResult (always ALREADY_PRESENT or INSTALLED)

        Raises:
            ConfigToolBootstrapError: If the tool could not be installed
        """
        result = self.install_tool(spec)
        if not result.ok:
            raise ConfigToolBootstrapError(spec.name, result.reason or "not installed")

        location = find_command(spec.probe_command)
        logger.info(f"{spec.name} ready at {location}")
        return result

    def install_all(self, specs: Iterable[ToolSpec]) -> InstallReport:
        """
        Install every tool in declared order.

        Args:
            specs: Tools to provision; order is preserved

        Returns:
            InstallReport with one entry per tool
        """
        report = InstallReport()
        for spec in specs:
            report.add(self.install_tool(spec))
        return report

    def _link_alias(self, spec: ToolSpec) -> None:
        """Expose a package's differently-named binary under the probe command."""
        if not spec.installs_as or self.bin_dir is None:
            return
        if is_available(spec.probe_command):
            return

        target = find_command(spec.installs_as)
        if target is None:
            return

        link = self.bin_dir / spec.probe_command
        try:
            if link.is_symlink():
                link.unlink()
            link.symlink_to(target)
        except OSError as e:
            logger.warning(f"Could not link {link} -> {target}: {e}")
            return
        logger.info(f"Linked {link} -> {target}")


__all__ = [
    "InstallOutcome",
    "ToolResult",
    "InstallReport",
    "InstallationOrchestrator",
]
