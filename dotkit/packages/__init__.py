"""
Package ecosystem adapters for dotkit.

Available Components:
--------------------
- PackageManagerAdapter: Abstract base class for ecosystem adapters
- HomebrewAdapter: Homebrew (macOS, Linuxbrew)
- AptAdapter: apt-get (Debian, Ubuntu)
- select_adapter(): Pick the adapter for a platform

Example Usage:
-------------
    from dotkit.core.platform import detect_platform
    from dotkit.packages import InstallSession, select_adapter

    adapter = select_adapter(detect_platform())
    if adapter is not None:
        session = InstallSession()
        adapter.ensure_present(session)
        adapter.install("jq", session)
"""

import logging
from typing import Optional

from dotkit.core.commands import is_available
from dotkit.core.exceptions import (
    PackageInstallError,
    PackageManagerUnavailableError,
)
from dotkit.core.platform import Platform, PlatformFamily
from dotkit.packages.apt import AptAdapter
from dotkit.packages.base import Ecosystem, InstallSession, PackageManagerAdapter
from dotkit.packages.homebrew import HomebrewAdapter

logger = logging.getLogger(__name__)


def select_adapter(platform: Platform) -> Optional[PackageManagerAdapter]:
    """
    Select the package ecosystem adapter for a platform.

    macOS always uses Homebrew. Linux uses Homebrew when brew is already
    installed (Linuxbrew) and apt-get otherwise. Other platforms get no
    adapter and fall back to platform-agnostic strategies.

    Args:
        platform: Detected host platform

    Returns:
        Adapter instance, or None for unsupported platforms
    """
    if platform.family is PlatformFamily.MAC:
        return HomebrewAdapter(platform)
    if platform.family is PlatformFamily.LINUX_APT:
        if is_available("brew"):
            logger.debug("Found brew on Linux, preferring Homebrew over apt")
            return HomebrewAdapter(platform)
        return AptAdapter(platform)
    return None


__all__ = [
    "AptAdapter",
    "Ecosystem",
    "HomebrewAdapter",
    "InstallSession",
    "PackageInstallError",
    "PackageManagerAdapter",
    "PackageManagerUnavailableError",
    "select_adapter",
]
