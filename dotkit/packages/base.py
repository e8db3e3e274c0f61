"""
Base package manager abstraction for dotkit.

This module provides the abstract adapter every package ecosystem
implements, plus the per-run session state the orchestrator threads
through install calls.

Classes:
    Ecosystem: Closed set of supported package ecosystems
    InstallSession: Orchestrator-local state for one provisioning run
    PackageManagerAdapter: Abstract base class for ecosystem adapters

Exceptions:
    PackageManagerUnavailableError: Manager missing and not bootstrappable
    PackageInstallError: Manager failed to install a package
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass

from dotkit.core.commands import CommandResult, is_available
from dotkit.core.exceptions import PackageInstallError
from dotkit.core.platform import Platform


class Ecosystem(enum.Enum):
    """Package ecosystems dotkit can drive."""

    HOMEBREW = "homebrew"
    APT = "apt"


@dataclass
class InstallSession:
    """
    State that lives for exactly one provisioning run.

    Attributes:
        index_refreshed: Whether the package index was refreshed this run
        ecosystem_ready: Whether ensure_present() succeeded this run
    """

    index_refreshed: bool = False
    ecosystem_ready: bool = False


class PackageManagerAdapter(ABC):
    """
    Abstract base class for package ecosystem adapters.

    Subclasses install packages non-interactively and report failures as
    PackageInstallError so the orchestrator can move on to the next tool.

    Example:
        class MyAdapter(PackageManagerAdapter):
            name = "mypm"
            ecosystem = Ecosystem.APT
            probe_command = "mypm"

            def ensure_present(self, session):
                ...

            def install(self, package, session):
                ...
    """

    name: str = ""
    ecosystem: Ecosystem
    probe_command: str = ""

    def __init__(self, platform: Platform):
        """
        Initialize adapter.

        Args:
            platform: Detected host platform
        """
        self.platform = platform

    def is_available(self) -> bool:
        """Check whether the manager's command resolves on PATH."""
        return is_available(self.probe_command)

    @abstractmethod
    def ensure_present(self, session: InstallSession) -> None:
        """
        Make sure the package manager can be used.

        Args:
            session: Current run state

        Raises:
            PackageManagerUnavailableError: If the manager cannot be made available
        """
        pass

    @abstractmethod
    def install(self, package: str, session: InstallSession) -> None:
        """
        Install a package by name, non-interactively.

        Args:
            package: Package name in this ecosystem's namespace
            session: Current run state

        Raises:
            PackageInstallError: If the manager exits non-zero
        """
        pass

    def _check(self, result: CommandResult, package: str) -> None:
        """Raise PackageInstallError for a failed install command."""
        if not result.ok:
            raise PackageInstallError(
                self.name, package, result.returncode, result.output_tail(5)
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(platform={self.platform})"
