"""
Hand-off to chezmoi, the configuration-application tool.

dotkit never reads the dotfiles repository itself. It decides where chezmoi
should take the source from and asks it to initialize and apply in one go:

- LOCAL: the working directory holds a `.chezmoiroot` marker, i.e. dotkit
  was started from inside a checkout of the repository
- REMOTE: https://github.com/<identity>/<repo>.git, where identity is
  GITHUB_USER, then USER, then the login name

A failed apply is fatal; chezmoi's own output is kept verbatim in the error.
"""

import enum
import getpass
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotkit.config.settings import Settings
from dotkit.core.commands import is_available, run_command
from dotkit.core.exceptions import ConfigApplyError
from dotkit.core.report import StepResult

logger = logging.getLogger(__name__)

SOURCE_MARKER = ".chezmoiroot"
REMOTE_URL_TEMPLATE = "https://github.com/{user}/{repo}.git"


class SourceMode(enum.Enum):
    """Where chezmoi reads the configuration source from."""

    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class ConfigurationTarget:
    """
    Configuration source chosen for this run.

    Attributes:
        mode: LOCAL working copy or REMOTE repository
        location: Directory path (LOCAL) or repository URL (REMOTE)
    """

    mode: SourceMode
    location: str

    @classmethod
    def local(cls, path: Path) -> "ConfigurationTarget":
        return cls(SourceMode.LOCAL, str(path))

    @classmethod
    def remote(cls, url: str) -> "ConfigurationTarget":
        return cls(SourceMode.REMOTE, url)

    def __str__(self) -> str:
        return f"{self.mode.value}: {self.location}"


def operator_identity(
    settings: Optional[Settings] = None, env: Optional[Mapping[str, str]] = None
) -> str:
    """
    Get the account name hosting the dotfiles repository.

    Precedence: GITHUB_USER, the github_user setting, USER, the login name.
    """
    env = os.environ if env is None else env
    if env.get("GITHUB_USER"):
        return env["GITHUB_USER"]
    if settings is not None and settings.github_user:
        return settings.github_user
    return env.get("USER") or getpass.getuser()


def has_source_marker(directory: Path) -> bool:
    """Check for a chezmoi source marker (file or directory) in a directory."""
    marker = directory / SOURCE_MARKER
    return marker.is_file() or marker.is_dir()


def resolve_target(
    cwd: Path,
    settings: Optional[Settings] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ConfigurationTarget:
    """
    Choose the configuration source.

    Args:
        cwd: Directory dotkit was started from
        settings: Operator settings (repo name/URL overrides)
        env: Environment mapping (defaults to os.environ)

    Returns:
        LOCAL target when cwd holds the marker, REMOTE target otherwise
    """
    if has_source_marker(cwd):
        logger.debug(f"Found {SOURCE_MARKER} in {cwd}, using local working copy")
        return ConfigurationTarget.local(cwd.resolve())

    settings = settings or Settings()
    if settings.repo_url:
        return ConfigurationTarget.remote(settings.repo_url)

    user = operator_identity(settings, env)
    return ConfigurationTarget.remote(
        REMOTE_URL_TEMPLATE.format(user=user, repo=settings.repo_name)
    )


class ConfigApplier:
    """Initialize chezmoi from a source and apply the configuration."""

    def __init__(self, executable: str = "chezmoi"):
        self.executable = executable

    def build_command(self, target: ConfigurationTarget) -> list:
        """Get the chezmoi command line for a target."""
        if target.mode is SourceMode.LOCAL:
            return [self.executable, "init", f"--source={target.location}", "--apply"]
        return [self.executable, "init", "--apply", target.location]

    def apply(self, target: ConfigurationTarget) -> None:
        """
        Initialize and apply the configuration.

        Args:
            target: Configuration source

        Raises:
            ConfigApplyError: If chezmoi exits non-zero
        """
        logger.info(f"Initializing {self.executable} from {target}...")
        result = run_command(self.build_command(target))

        if result.stdout.strip():
            logger.info(result.stdout.rstrip())

        if not result.ok:
            output = "\n".join(
                part for part in (result.stdout.rstrip(), result.stderr.rstrip()) if part
            )
            raise ConfigApplyError(
                f"{self.executable} init failed with exit code {result.returncode}",
                output=output,
            )
        logger.info("Configuration applied")


def lock_plugins(manager: str = "sheldon") -> StepResult:
    """
    Download the shell plugin set (best effort).

    Args:
        manager: Shell plugin manager command

    Returns:
        StepResult; never raises
    """
    name = f"{manager} lock"
    if not is_available(manager):
        logger.debug(f"{manager} not installed, skipping plugin lock")
        return StepResult.skipped(name, f"{manager} not installed")

    logger.info(f"Initializing {manager} plugins...")
    result = run_command([manager, "lock"])
    if not result.ok:
        logger.warning(
            f"{manager} lock failed; plugins will download on first shell start"
        )
        return StepResult.failed(
            name, result.output_tail(3) or f"exit {result.returncode}"
        )

    return StepResult.success(name)
