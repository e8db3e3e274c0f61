"""
Homebrew package manager adapter.

Homebrew is bootstrapped on demand with its official install script. The
installer does not touch the current process environment, so after a
fresh install the adapter points PATH and the HOMEBREW_* variables at the
new prefix itself, the way `brew shellenv` would.
"""

import logging
import os
from pathlib import Path

from dotkit.core.commands import run_command
from dotkit.core.download import run_remote_script
from dotkit.core.exceptions import DownloadError, PackageManagerUnavailableError
from dotkit.core.platform import PlatformFamily
from dotkit.packages.base import Ecosystem, InstallSession, PackageManagerAdapter

logger = logging.getLogger(__name__)

INSTALL_SCRIPT_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

MACOS_ARM_PREFIX = Path("/opt/homebrew")
MACOS_INTEL_PREFIX = Path("/usr/local")
LINUXBREW_PREFIX = Path("/home/linuxbrew/.linuxbrew")


class HomebrewAdapter(PackageManagerAdapter):
    """Install packages with Homebrew (macOS, or Linuxbrew when present)."""

    name = "brew"
    ecosystem = Ecosystem.HOMEBREW
    probe_command = "brew"

    def prefix(self) -> Path:
        """
        Get the Homebrew install prefix for this platform.

        Returns:
            /opt/homebrew on Apple Silicon, /usr/local on Intel macOS, and
            the Linuxbrew prefix elsewhere (falling back to ~/.linuxbrew when
            only the per-user install exists)
        """
        if self.platform.family is PlatformFamily.MAC:
            if self.platform.arch == "arm64":
                return MACOS_ARM_PREFIX
            return MACOS_INTEL_PREFIX

        user_prefix = Path.home() / ".linuxbrew"
        if not (LINUXBREW_PREFIX / "bin" / "brew").exists() and (
            user_prefix / "bin" / "brew"
        ).exists():
            return user_prefix
        return LINUXBREW_PREFIX

    def ensure_present(self, session: InstallSession) -> None:
        if self.is_available():
            logger.debug("Homebrew already installed")
            session.ecosystem_ready = True
            return

        logger.info("Installing Homebrew (it may ask for your password)...")
        try:
            # The installer needs the terminal for sudo and its confirmation prompt
            result = run_remote_script(
                INSTALL_SCRIPT_URL, interpreter="bash", interactive=True
            )
        except DownloadError as e:
            raise PackageManagerUnavailableError(
                f"Could not download Homebrew installer: {e}"
            ) from e

        if not result.ok:
            message = f"Homebrew installer exited with {result.returncode}"
            tail = result.output_tail(5)
            if tail:
                message = f"{message}: {tail}"
            raise PackageManagerUnavailableError(message)

        self.activate_environment()

        if not self.is_available():
            raise PackageManagerUnavailableError(
                f"Homebrew installed but brew not found under {self.prefix()}"
            )
        session.ecosystem_ready = True
        logger.info(f"Homebrew installed at {self.prefix()}")

    def activate_environment(self) -> None:
        """Expose the Homebrew prefix to commands spawned by this process."""
        prefix = self.prefix()
        os.environ["HOMEBREW_PREFIX"] = str(prefix)
        os.environ["HOMEBREW_CELLAR"] = str(prefix / "Cellar")
        # Intel macOS keeps the git checkout in a subdirectory of /usr/local
        if prefix == MACOS_INTEL_PREFIX:
            os.environ["HOMEBREW_REPOSITORY"] = str(prefix / "Homebrew")
        else:
            os.environ["HOMEBREW_REPOSITORY"] = str(prefix)

        path_entries = [p for p in os.environ.get("PATH", "").split(os.pathsep) if p]
        new_entries = [str(prefix / "bin"), str(prefix / "sbin")]
        path_entries = [p for p in path_entries if p not in new_entries]
        os.environ["PATH"] = os.pathsep.join(new_entries + path_entries)
        logger.debug(f"Activated Homebrew environment from {prefix}")

    def install(self, package: str, session: InstallSession) -> None:
        logger.info(f"Installing {package} via brew...")
        result = run_command(
            ["brew", "install", package], env={"HOMEBREW_NO_AUTO_UPDATE": "1"}
        )
        self._check(result, package)
