"""
Tool installation for dotkit.

- strategy: ToolSpec and the install strategies
- catalog: the default tool set
- orchestrator: the idempotent install engine and its report types
"""

from dotkit.tools.catalog import config_tool_spec, core_tool_specs, filter_specs
from dotkit.tools.orchestrator import (
    InstallationOrchestrator,
    InstallOutcome,
    InstallReport,
    ToolResult,
)
from dotkit.tools.strategy import (
    EcosystemPackage,
    FromSourceBuild,
    InstallStrategy,
    RemoteScript,
    StrategyContext,
    StrategyKind,
    ToolSpec,
)

__all__ = [
    "config_tool_spec",
    "core_tool_specs",
    "filter_specs",
    "InstallationOrchestrator",
    "InstallOutcome",
    "InstallReport",
    "ToolResult",
    "EcosystemPackage",
    "FromSourceBuild",
    "InstallStrategy",
    "RemoteScript",
    "StrategyContext",
    "StrategyKind",
    "ToolSpec",
]
