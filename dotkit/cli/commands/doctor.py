"""
Doctor command for diagnosing environment issues.

This module provides read-only health checks for a dotkit machine:
platform support, the package manager, chezmoi, the core tool set,
and the login shell. Nothing is installed or changed.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotkit.cli.utils import safe_print
from dotkit.config.settings import Settings, load_settings
from dotkit.core.commands import find_command
from dotkit.core.directory import user_bin_dir
from dotkit.core.exceptions import SettingsError
from dotkit.core.platform import Platform, detect_platform
from dotkit.packages import select_adapter
from dotkit.shell.configurator import current_login_shell
from dotkit.tools.catalog import config_tool_spec, core_tool_specs, filter_specs
from dotkit.tools.strategy import ToolSpec

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Result of a health check."""

    name: str
    passed: bool
    message: str
    fix_command: Optional[str] = None
    critical: bool = False


class EnvironmentChecker:
    """Check workstation health."""

    def __init__(self, platform: Platform):
        self.platform = platform

    def check_platform(self) -> CheckResult:
        """
        Check the platform family.

        Returns:
            CheckResult (informational; unsupported platforms show up in the
            package manager check)
        """
        return CheckResult(name="Platform", passed=True, message=str(self.platform))

    def check_package_manager(self) -> CheckResult:
        """
        Check that a package ecosystem is usable on this platform.

        Returns:
            CheckResult; critical when the platform has no ecosystem at all
        """
        adapter = select_adapter(self.platform)
        if adapter is None:
            return CheckResult(
                name="Package Manager",
                passed=False,
                message=f"No supported package manager for {self.platform.family.value}",
                fix_command="Use macOS or a Debian-based Linux distribution",
                critical=True,
            )

        if adapter.is_available():
            return CheckResult(
                name="Package Manager",
                passed=True,
                message=f"{adapter.name} available",
            )

        return CheckResult(
            name="Package Manager",
            passed=False,
            message=f"{adapter.name} not installed",
            fix_command="Run: dotkit bootstrap",
        )

    def check_config_tool(self, spec: ToolSpec) -> CheckResult:
        """
        Check chezmoi, without which no configuration can be applied.

        Returns:
            CheckResult (critical)
        """
        location = find_command(spec.probe_command)
        if location is not None:
            return CheckResult(name=spec.name, passed=True, message=str(location))

        return CheckResult(
            name=spec.name,
            passed=False,
            message=f"{spec.probe_command} not found in PATH",
            fix_command="Run: dotkit bootstrap",
            critical=True,
        )

    def check_tool(self, spec: ToolSpec) -> CheckResult:
        """Check one core tool (optional)."""
        found = next(
            (p for p in map(find_command, spec.probe_commands) if p is not None), None
        )
        if found is not None:
            return CheckResult(name=spec.name, passed=True, message=str(found))

        return CheckResult(
            name=spec.name,
            passed=False,
            message="not installed",
            fix_command="Run: dotkit bootstrap",
        )

    def check_login_shell(self, target: str) -> CheckResult:
        """
        Check that the login shell is the configured one.

        Args:
            target: Shell name or path from the settings
        """
        current = current_login_shell()
        if current and Path(current).name == Path(target).name:
            return CheckResult(name="Login Shell", passed=True, message=current)

        return CheckResult(
            name="Login Shell",
            passed=False,
            message=f"{current or 'unknown'} (expected {target})",
            fix_command=f"chsh -s $(command -v {target})",
        )


class DoctorRunner:
    """Manages running health checks."""

    def __init__(self, settings: Settings, platform: Optional[Platform] = None):
        """Initialize doctor runner."""
        self.settings = settings
        self.platform = platform or detect_platform()
        self.checker = EnvironmentChecker(self.platform)

    def run_all_checks(self) -> List[CheckResult]:
        """Run all health checks."""
        bin_dir = user_bin_dir()
        results = [
            self.checker.check_platform(),
            self.checker.check_package_manager(),
            self.checker.check_config_tool(config_tool_spec(bin_dir)),
        ]

        specs = filter_specs(core_tool_specs(bin_dir), self.settings.skip_tools)
        results.extend(self.checker.check_tool(spec) for spec in specs)
        results.append(self.checker.check_login_shell(self.settings.shell))

        return results


def run(args) -> int:
    """
    Run doctor command.

    Args:
        args: Parsed arguments from argparse

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    quiet = args.quiet

    try:
        settings = load_settings(args.config, os.environ)
    except SettingsError as e:
        safe_print(f"❌ Settings: {e}")
        logger.error(f"Settings: {e}")
        return 1

    if not quiet:
        safe_print("🩺 Running dotkit diagnostics...\n")
        logger.debug("Starting environment diagnostics")

    runner = DoctorRunner(settings)
    checks = runner.run_all_checks()

    passed = 0
    failed = 0
    warnings = 0

    for result in checks:
        if result.passed:
            passed += 1
            if not quiet:
                safe_print(f"✅ {result.name}: {result.message}")
            logger.debug(f"Check passed: {result.name}")
            continue

        if result.critical:
            failed += 1
            safe_print(f"❌ {result.name}: {result.message}")
        else:
            warnings += 1
            if not quiet:
                safe_print(f"⚠️  {result.name}: {result.message}")

        if result.fix_command and (result.critical or not quiet):
            safe_print(f"   💡 Fix: {result.fix_command}")

    if not quiet:
        safe_print(
            f"\n📊 Summary: {passed} passed, {failed} failed, {warnings} warnings"
        )

    if failed == 0 and warnings == 0:
        if not quiet:
            safe_print("\n✅ Your environment is healthy!")
        return 0
    elif failed == 0:
        if not quiet:
            safe_print(f"\n⚠️  Found {warnings} optional item(s) missing")
        return 0
    else:
        safe_print(f"\n❌ Found {failed} critical issue(s) that need attention")
        return 1
