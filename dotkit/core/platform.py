"""
Platform detection for dotkit.

Resolves the host's OS family and CPU architecture once per process. The
family decides which package ecosystem is used and which install strategies
apply; the architecture decides where Homebrew lives on macOS.

Families:
- MAC: macOS (Homebrew)
- LINUX_APT: Linux with an APT-style package manager
- OTHER: anything else; only platform-agnostic strategies apply

Usage:
    from dotkit.core.platform import detect_platform

    platform_info = detect_platform()
    print(f"Family: {platform_info.family.value}")
    print(f"Architecture: {platform_info.arch}")
"""

import enum
import functools
import platform
import shutil
from dataclasses import dataclass


class PlatformFamily(enum.Enum):
    """Closed set of OS families dotkit knows how to provision."""

    MAC = "macos"
    LINUX_APT = "linux-apt"
    OTHER = "other"


@dataclass(frozen=True)
class Platform:
    """
    Immutable platform information.

    Attributes:
        family: OS family the host belongs to
        arch: Normalized CPU architecture ('x64', 'arm64', 'x86', 'arm', ...)
    """

    family: PlatformFamily
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'macos-arm64').

        Example:
            >>> Platform(PlatformFamily.LINUX_APT, "x64").platform_string()
            'linux-apt-x64'
        """
        return f"{self.family.value}-{self.arch}"

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.
    It never raises; unknown systems map to PlatformFamily.OTHER.

    Returns:
        Platform instance for the running host
    """
    return Platform(family=_detect_family(), arch=_detect_architecture())


def _detect_family() -> PlatformFamily:
    """
    Detect the OS family.

    Returns:
        MAC for Darwin, LINUX_APT for Linux hosts with apt-get, OTHER otherwise
    """
    system = platform.system().lower()

    if system == "darwin":
        return PlatformFamily.MAC
    if system == "linux" and shutil.which("apt-get"):
        return PlatformFamily.LINUX_APT
    return PlatformFamily.OTHER


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm', or the raw
        machine string for anything unrecognized
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    elif not machine:
        return "unknown"
    else:
        return machine


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Forces the next call to detect_platform() to re-detect. Useful for testing.
    """
    detect_platform.cache_clear()


__all__ = [
    "Platform",
    "PlatformFamily",
    "detect_platform",
    "clear_platform_cache",
]
