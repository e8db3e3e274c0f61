"""
End-to-end provisioning run.

Steps, in order:
    1. Detect the platform
    2. Create the standard directory layout            (fatal)
    3. Prepare the package ecosystem                   (best effort)
    4. Bootstrap chezmoi                               (fatal)
    5. Install the core tool set                       (per-tool, best effort)
    6. Configure the login shell                       (best effort)
    7. Apply the configuration with chezmoi            (fatal)
    8. Lock shell plugins                              (best effort)

Fatal steps raise FatalProvisioningError subclasses and stop the run;
everything else lands in the ProvisionReport.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotkit.config.settings import Settings
from dotkit.core.directory import ensure_directories, prepend_to_path, user_bin_dir
from dotkit.core.platform import Platform, detect_platform
from dotkit.core.report import StepResult
from dotkit.dotfiles.applier import (
    ConfigApplier,
    ConfigurationTarget,
    lock_plugins,
    resolve_target,
)
from dotkit.packages import select_adapter
from dotkit.shell.configurator import ShellConfigurator
from dotkit.tools.catalog import config_tool_spec, core_tool_specs, filter_specs
from dotkit.tools.orchestrator import (
    InstallationOrchestrator,
    InstallReport,
    ToolResult,
)

logger = logging.getLogger(__name__)


@dataclass
class ProvisionOptions:
    """
    Per-invocation switches (from the command line).

    Attributes:
        skip_tools: Do not install the core tool set
        skip_shell: Leave the login shell alone
        source_dir: Directory checked for a local dotfiles checkout
    """

    skip_tools: bool = False
    skip_shell: bool = False
    source_dir: Optional[Path] = None


@dataclass
class ProvisionReport:
    """Everything a completed run did."""

    platform: Platform
    directories: List[Path] = field(default_factory=list)
    ecosystem: Optional[str] = None
    config_tool: Optional[ToolResult] = None
    tools: InstallReport = field(default_factory=InstallReport)
    steps: List[StepResult] = field(default_factory=list)
    target: Optional[ConfigurationTarget] = None


class Provisioner:
    """Run the provisioning pipeline."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        options: Optional[ProvisionOptions] = None,
        platform: Optional[Platform] = None,
        shell_configurator: Optional[ShellConfigurator] = None,
        applier: Optional[ConfigApplier] = None,
    ):
        """
        Initialize provisioner.

        Args:
            settings: Operator settings (defaults when None)
            options: Invocation switches (defaults when None)
            platform: Platform information (auto-detected if None)
            shell_configurator: Login shell step (default configurator if None)
            applier: chezmoi hand-off (default applier if None)
        """
        self.settings = settings or Settings()
        self.options = options or ProvisionOptions()
        self.platform = platform or detect_platform()
        self.shell_configurator = shell_configurator or ShellConfigurator()
        self.applier = applier or ConfigApplier()

    def run(self) -> ProvisionReport:
        """
        Provision the workstation.

        Returns:
            ProvisionReport describing the run

        Raises:
            FatalProvisioningError: If a fatal step fails
        """
        logger.info("Bootstrapping dotfiles...")
        logger.info(f"Platform: {self.platform}")
        report = ProvisionReport(platform=self.platform)

        report.directories = ensure_directories()
        bin_dir = user_bin_dir()
        prepend_to_path(bin_dir)

        adapter = select_adapter(self.platform)
        orchestrator = InstallationOrchestrator(self.platform, adapter, bin_dir)
        if orchestrator.prepare():
            report.ecosystem = adapter.name

        report.config_tool = orchestrator.bootstrap_config_tool(
            config_tool_spec(bin_dir)
        )

        if self.options.skip_tools:
            logger.info("Skipping core tools")
        else:
            logger.info("Installing core tools...")
            specs = filter_specs(core_tool_specs(bin_dir), self.settings.skip_tools)
            report.tools = orchestrator.install_all(specs)

        if self.options.skip_shell:
            logger.info("Skipping login shell configuration")
        else:
            report.steps.append(
                self.shell_configurator.ensure_default_shell(self.settings.shell)
            )

        source_dir = self.options.source_dir or Path.cwd()
        report.target = resolve_target(source_dir, self.settings)
        self.applier.apply(report.target)

        report.steps.append(lock_plugins())

        logger.info("Bootstrap complete! Open a new terminal or run: exec zsh")
        return report


__all__ = ["ProvisionOptions", "ProvisionReport", "Provisioner"]
