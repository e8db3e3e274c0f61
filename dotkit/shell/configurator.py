"""
Default login shell configuration.

Changing the login shell needs two privileged operations: the shell must be
listed in the approved-shells file, and `chsh` must accept it. Neither is
fatal; failures are reported with the command the operator can run by hand.
"""

import getpass
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from dotkit.core.commands import find_command, privileged, run_command
from dotkit.core.report import StepResult

logger = logging.getLogger(__name__)

SHELLS_FILE = Path("/etc/shells")
STEP_NAME = "login shell"


def current_login_shell(env: Optional[Mapping[str, str]] = None) -> str:
    """Get the operator's current login shell path from $SHELL (may be empty)."""
    env = os.environ if env is None else env
    return env.get("SHELL", "")


class ShellConfigurator:
    """Make a target shell the operator's login shell."""

    def __init__(
        self,
        shells_file: Path = SHELLS_FILE,
        env: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize configurator.

        Args:
            shells_file: File listing approved login shells
            env: Environment mapping (defaults to os.environ)
        """
        self.shells_file = shells_file
        self.env = os.environ if env is None else env

    def resolve_target(self, target: str) -> Optional[Path]:
        """
        Resolve a shell name or path to an absolute path.

        Args:
            target: Shell name ('zsh') or absolute path ('/bin/zsh')

        Returns:
            Absolute path, or None if the shell is not installed
        """
        if os.path.isabs(target):
            path = Path(target)
            return path if path.exists() else None
        return find_command(target)

    def is_registered(self, shell_path: Path) -> bool:
        """Check whether the shell is listed in the approved-shells file."""
        try:
            lines = self.shells_file.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            logger.debug(f"Cannot read {self.shells_file}: {e}")
            return False
        return str(shell_path) in (line.strip() for line in lines)

    def register(self, shell_path: Path) -> bool:
        """
        Append the shell to the approved-shells file (needs root).

        Returns:
            True on success
        """
        logger.warning(f"{shell_path} not in {self.shells_file}, adding it")
        result = run_command(
            privileged(["tee", "-a", str(self.shells_file)]), input=f"{shell_path}\n"
        )
        if not result.ok:
            logger.warning(
                f"Could not add {shell_path} to {self.shells_file}: "
                f"{result.output_tail(3)}"
            )
        return result.ok

    def ensure_default_shell(self, target: str = "zsh") -> StepResult:
        """
        Make target the login shell.

        No-op when the current login shell already has the target's name.

        Args:
            target: Shell name or absolute path

        Returns:
            StepResult; never raises for privilege or tooling failures
        """
        target_name = os.path.basename(target)
        current = current_login_shell(self.env)
        if current and os.path.basename(current) == target_name:
            logger.debug(f"Login shell is already {current}")
            return StepResult.success(STEP_NAME, f"already {current}")

        shell_path = self.resolve_target(target)
        if shell_path is None:
            logger.warning(f"{target} is not installed; keeping login shell {current}")
            return StepResult.skipped(STEP_NAME, f"{target} not installed")

        logger.info(f"Setting default shell to {shell_path}...")
        if not self.is_registered(shell_path):
            self.register(shell_path)

        result = run_command(["chsh", "-s", str(shell_path)], capture=False)
        if not result.ok:
            user = self.env.get("USER") or getpass.getuser()
            hint = f"sudo chsh -s {shell_path} {user}"
            logger.warning(f"Could not change shell (try: {hint})")
            return StepResult.failed(
                STEP_NAME, result.output_tail(3) or "chsh failed", hint=hint
            )

        return StepResult.success(STEP_NAME, f"changed to {shell_path}")
