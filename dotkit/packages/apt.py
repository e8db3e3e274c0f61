"""
APT package manager adapter.

apt-get is assumed to ship with the host. The package index is refreshed
at most once per run; the session remembers whether that has happened.
"""

import logging

from dotkit.core.commands import privileged, run_command
from dotkit.core.exceptions import PackageManagerUnavailableError
from dotkit.packages.base import Ecosystem, InstallSession, PackageManagerAdapter

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


class AptAdapter(PackageManagerAdapter):
    """Install packages with apt-get."""

    name = "apt"
    ecosystem = Ecosystem.APT
    probe_command = "apt-get"

    def ensure_present(self, session: InstallSession) -> None:
        if not self.is_available():
            raise PackageManagerUnavailableError("apt-get not found in PATH")
        session.ecosystem_ready = True

    def refresh_index(self, session: InstallSession) -> None:
        """
        Refresh the package index unless it was already refreshed this run.

        A failed refresh is logged; installs still proceed against the
        existing index and the next install attempts the refresh again.
        """
        if session.index_refreshed:
            return

        logger.info("Refreshing apt package index...")
        result = run_command(privileged(["apt-get", "update", "-qq"]), env=APT_ENV)
        if result.ok:
            session.index_refreshed = True
        else:
            logger.warning(
                f"apt-get update failed (exit {result.returncode}): "
                f"{result.output_tail(3)}"
            )

    def install(self, package: str, session: InstallSession) -> None:
        self.refresh_index(session)
        logger.info(f"Installing {package} via apt...")
        result = run_command(
            privileged(["apt-get", "install", "-y", "-qq", package]), env=APT_ENV
        )
        self._check(result, package)
