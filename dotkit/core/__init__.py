"""
Core framework for dotkit.

This package provides the host-facing building blocks used by every other
component: platform detection, command lookup and execution, script
downloads, the standard directory layout, and the exception hierarchy.
"""

from dotkit.core.commands import (
    CommandResult,
    find_command,
    is_available,
    run_command,
)
from dotkit.core.directory import (
    ensure_directories,
    prepend_to_path,
    user_bin_dir,
    xdg_dir,
)
from dotkit.core.exceptions import (
    ConfigApplyError,
    ConfigToolBootstrapError,
    DotkitError,
    FatalProvisioningError,
    LayoutError,
    RecoverableToolError,
)
from dotkit.core.platform import Platform, PlatformFamily, detect_platform
from dotkit.core.report import StepResult, StepStatus

__all__ = [
    "CommandResult",
    "find_command",
    "is_available",
    "run_command",
    "ensure_directories",
    "prepend_to_path",
    "user_bin_dir",
    "xdg_dir",
    "ConfigApplyError",
    "ConfigToolBootstrapError",
    "DotkitError",
    "FatalProvisioningError",
    "LayoutError",
    "RecoverableToolError",
    "Platform",
    "PlatformFamily",
    "detect_platform",
    "StepResult",
    "StepStatus",
]
