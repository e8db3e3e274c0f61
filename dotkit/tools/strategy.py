"""
Install strategies and tool specifications.

A ToolSpec names a tool, the command that proves it is installed, and an
ordered list of strategies. Each strategy is one self-contained way of
installing the tool:

- EcosystemPackage: install a package through the run's package manager
- RemoteScript: fetch an installer script and pipe it into a shell
- FromSourceBuild: build with a language toolchain (`cargo install eza`)

Strategies decide for themselves whether they apply in the current run and
raise a RecoverableToolError subclass when they fail.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional, Sequence, Tuple

from dotkit.core.commands import is_available, run_command
from dotkit.core.download import run_remote_script
from dotkit.core.exceptions import (
    PackageManagerUnavailableError,
    ScriptInstallError,
    SourceBuildError,
)
from dotkit.core.platform import Platform, PlatformFamily
from dotkit.packages.base import Ecosystem, InstallSession, PackageManagerAdapter


class StrategyKind(enum.Enum):
    """Kinds of install strategy, recorded in the run report."""

    ECOSYSTEM_PACKAGE = "package"
    REMOTE_SCRIPT = "script"
    FROM_SOURCE = "source"


@dataclass
class StrategyContext:
    """
    Everything a strategy may consult while deciding and installing.

    Attributes:
        platform: Detected host platform
        adapter: Package manager adapter for this run, or None
        session: Per-run install state
    """

    platform: Platform
    adapter: Optional[PackageManagerAdapter]
    session: InstallSession

    @property
    def ecosystem(self) -> Optional[Ecosystem]:
        """The usable ecosystem this run, or None if there is none."""
        if self.adapter is None or not self.session.ecosystem_ready:
            return None
        return self.adapter.ecosystem


class InstallStrategy(ABC):
    """
    Abstract base class for install strategies.

    Subclasses are frozen dataclasses that carry an optional `families`
    condition restricting them to some platform families.
    """

    kind: StrategyKind
    families: Optional[FrozenSet[PlatformFamily]]

    def applies_on(self, family: PlatformFamily) -> bool:
        """Check the strategy's platform-family condition."""
        return self.families is None or family in self.families

    def is_applicable(self, context: StrategyContext) -> bool:
        """
        Check whether this strategy can be attempted right now.

        Args:
            context: Current strategy context

        Returns:
            True if the strategy should be tried
        """
        return self.applies_on(context.platform.family)

    @abstractmethod
    def execute(self, context: StrategyContext) -> None:
        """
        Install the tool.

        Args:
            context: Current strategy context

        Raises:
            RecoverableToolError: If the installation fails
        """
        pass

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable description for logs and reports."""
        pass


@dataclass(frozen=True)
class EcosystemPackage(InstallStrategy):
    """Install a package through the run's package ecosystem."""

    ecosystem: Ecosystem
    package: str
    families: Optional[FrozenSet[PlatformFamily]] = None

    kind = StrategyKind.ECOSYSTEM_PACKAGE

    def is_applicable(self, context: StrategyContext) -> bool:
        return super().is_applicable(context) and context.ecosystem is self.ecosystem

    def execute(self, context: StrategyContext) -> None:
        if context.adapter is None:
            raise PackageManagerUnavailableError(
                f"No package manager available for {self.package}"
            )
        context.adapter.install(self.package, context.session)

    def describe(self) -> str:
        return f"{self.ecosystem.value} package {self.package}"


@dataclass(frozen=True)
class RemoteScript(InstallStrategy):
    """
    Fetch an installer script and run it with a shell.

    `env` accepts a mapping and is stored as sorted (name, value) pairs so
    the strategy stays hashable.
    """

    url: str
    args: Tuple[str, ...] = ()
    interpreter: str = "sh"
    env: Tuple[Tuple[str, str], ...] = ()
    families: Optional[FrozenSet[PlatformFamily]] = None

    kind = StrategyKind.REMOTE_SCRIPT

    def __post_init__(self):
        if isinstance(self.env, Mapping):
            object.__setattr__(self, "env", tuple(sorted(self.env.items())))
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    def execute(self, context: StrategyContext) -> None:
        result = run_remote_script(
            self.url, interpreter=self.interpreter, args=self.args, env=dict(self.env)
        )
        if not result.ok:
            raise ScriptInstallError(
                f"Install script {self.url} exited with {result.returncode}: "
                f"{result.output_tail(5)}"
            )

    def describe(self) -> str:
        return f"install script {self.url}"


@dataclass(frozen=True)
class FromSourceBuild(InstallStrategy):
    """Build and install with a language toolchain, e.g. `cargo install eza`."""

    toolchain: str
    spec: str
    families: Optional[FrozenSet[PlatformFamily]] = None

    kind = StrategyKind.FROM_SOURCE

    def is_applicable(self, context: StrategyContext) -> bool:
        # Checked lazily so a toolchain installed earlier in the run counts
        return super().is_applicable(context) and is_available(self.toolchain)

    def execute(self, context: StrategyContext) -> None:
        result = run_command([self.toolchain, "install", self.spec])
        if not result.ok:
            raise SourceBuildError(
                f"{self.toolchain} install {self.spec} exited with "
                f"{result.returncode}: {result.output_tail(5)}"
            )

    def describe(self) -> str:
        return f"{self.toolchain} install {self.spec}"


@dataclass(frozen=True)
class ToolSpec:
    """
    A tool to provision.

    Attributes:
        name: Logical tool name used in logs, reports, and settings
        probe_command: Command whose presence on PATH means "installed"
        strategies: Install strategies in order of preference
        installs_as: Binary some packages provide instead of probe_command
            (Debian ships `fd` as `fdfind`); either name counts as installed
        description: One-line description for `dotkit doctor`
    """

    name: str
    probe_command: str
    strategies: Tuple[InstallStrategy, ...]
    installs_as: Optional[str] = None
    description: str = ""

    def __post_init__(self):
        """Validate specification after initialization."""
        if not self.name:
            raise ValueError("Tool name cannot be empty")
        if not self.probe_command:
            raise ValueError(f"Tool {self.name} has no probe command")
        if not isinstance(self.strategies, tuple):
            object.__setattr__(self, "strategies", tuple(self.strategies))
        if not self.strategies:
            raise ValueError(f"Tool {self.name} has no install strategies")

    @property
    def probe_commands(self) -> Sequence[str]:
        """All command names that count as the tool being present."""
        if self.installs_as:
            return (self.probe_command, self.installs_as)
        return (self.probe_command,)

    def is_present(self) -> bool:
        """Idempotency probe: is any of the tool's commands on PATH?"""
        return any(is_available(name) for name in self.probe_commands)


__all__ = [
    "StrategyKind",
    "StrategyContext",
    "InstallStrategy",
    "EcosystemPackage",
    "RemoteScript",
    "FromSourceBuild",
    "ToolSpec",
]
