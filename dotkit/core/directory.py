"""
Standard directory layout for a provisioned workstation.

Directory Structure (XDG base directories, each root overridable):
    $XDG_CONFIG_HOME (~/.config)
        - secrets/       : Private configuration, never committed
    $XDG_DATA_HOME (~/.local/share)
    $XDG_CACHE_HOME (~/.cache)
        - zsh/           : Completion dumps and shell caches
    $XDG_STATE_HOME (~/.local/state)
        - zsh/           : Shell history
    ~/.local/bin         : User-level executables installed by scripts

Failing to create any of these is fatal: nothing downstream can work
without writable standard directories.
"""

import logging
import os
from pathlib import Path
from typing import List, Mapping, Optional

from dotkit.core.exceptions import LayoutError

logger = logging.getLogger(__name__)

XDG_DEFAULTS = {
    "XDG_CONFIG_HOME": ".config",
    "XDG_DATA_HOME": ".local/share",
    "XDG_CACHE_HOME": ".cache",
    "XDG_STATE_HOME": ".local/state",
}

# (environment variable, subdirectory) pairs for the standard layout
STANDARD_LAYOUT = [
    ("XDG_CONFIG_HOME", "secrets"),
    ("XDG_DATA_HOME", ""),
    ("XDG_CACHE_HOME", "zsh"),
    ("XDG_STATE_HOME", "zsh"),
]


def xdg_dir(name: str, env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Resolve an XDG base directory.

    Args:
        name: Variable name (e.g., 'XDG_CONFIG_HOME')
        env: Environment mapping (defaults to os.environ)

    Returns:
        The override when set and non-empty, otherwise the documented default

    Raises:
        KeyError: If name is not one of the four XDG base directories
    """
    env = os.environ if env is None else env
    default = XDG_DEFAULTS[name]
    override = env.get(name, "")
    if override:
        return Path(override).expanduser()
    return Path.home() / default


def user_bin_dir() -> Path:
    """Get the user-level executable directory (~/.local/bin)."""
    return Path.home() / ".local" / "bin"


def standard_directories(env: Optional[Mapping[str, str]] = None) -> List[Path]:
    """
    List every directory of the standard layout in creation order.

    Args:
        env: Environment mapping with optional XDG overrides

    Returns:
        Directory paths
    """
    paths = []
    for name, subdir in STANDARD_LAYOUT:
        base = xdg_dir(name, env)
        paths.append(base / subdir if subdir else base)
    paths.append(user_bin_dir())
    return paths


def ensure_directories(env: Optional[Mapping[str, str]] = None) -> List[Path]:
    """
    Create the standard directory layout (idempotent).

    Args:
        env: Environment mapping with optional XDG overrides

    Returns:
        The directories that now exist

    Raises:
        LayoutError: If any directory cannot be created
    """
    created = []
    for path in standard_directories(env):
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LayoutError(path, str(e)) from e
        if not path.is_dir():
            raise LayoutError(path, "path exists and is not a directory")
        logger.debug(f"Ensured directory exists: {path}")
        created.append(path)
    return created


def prepend_to_path(directory: Path) -> bool:
    """
    Make a directory resolvable for commands spawned later in this process.

    Args:
        directory: Directory to put in front of PATH

    Returns:
        True if PATH changed, False if the directory was already on it
    """
    entries = [p for p in os.environ.get("PATH", "").split(os.pathsep) if p]
    if str(directory) in entries:
        return False
    os.environ["PATH"] = os.pathsep.join([str(directory), *entries])
    logger.debug(f"Added {directory} to PATH")
    return True


__all__ = [
    "xdg_dir",
    "user_bin_dir",
    "standard_directories",
    "ensure_directories",
    "prepend_to_path",
]
