"""
Command availability checks and synchronous process execution.

`is_available()` is the single idempotency predicate used across dotkit:
a tool counts as installed exactly when its command resolves on the
executable search path. Nothing is executed to answer that question.

`run_command()` runs an external program to completion and always returns
a CommandResult; a missing executable or a timeout is reported as a
non-zero result instead of an exception so callers can decide whether the
failure is fatal.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 1800
"""Upper bound in seconds for a single external command (installs can be slow)."""

COMMAND_NOT_FOUND = 127
COMMAND_TIMED_OUT = 124


@dataclass
class CommandResult:
    """Outcome of an external command."""

    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def output_tail(self, lines: int = 20) -> str:
        """
        Get the last lines of combined output for diagnostics.

        stderr is preferred since that is where installers report problems.
        """
        text = self.stderr.strip() or self.stdout.strip()
        if not text:
            return ""
        return "\n".join(text.splitlines()[-lines:])


def find_command(name: str) -> Optional[Path]:
    """
    Resolve a command on the executable search path.

    Args:
        name: Command name (e.g., 'brew', 'rg')

    Returns:
        Path to the executable, or None if it does not resolve
    """
    found = shutil.which(name)
    return Path(found) if found else None


def is_available(name: str) -> bool:
    """
    Check whether a command resolves on the executable search path.

    PATH is read at call time, so directories added during the run count.

    Args:
        name: Command name

    Returns:
        True if the command resolves
    """
    return find_command(name) is not None


def run_command(
    argv: Sequence[str],
    env: Optional[Mapping[str, str]] = None,
    input: Optional[str] = None,
    cwd: Optional[Path] = None,
    timeout: int = DEFAULT_TIMEOUT,
    capture: bool = True,
) -> CommandResult:
    """
    Run an external command and wait for it to finish.

    Args:
        argv: Command and arguments
        env: Extra environment variables layered over os.environ
        input: Text fed to the command's stdin
        cwd: Working directory
        timeout: Seconds before the command is abandoned
        capture: Capture output; when False the command talks to the terminal
            directly, which interactive prompts need

    Returns:
        CommandResult with exit status and captured output
    """
    argv = [str(arg) for arg in argv]
    full_env: Optional[Dict[str, str]] = None
    if env:
        full_env = dict(os.environ)
        full_env.update(env)

    logger.debug(f"Running: {' '.join(argv)}")

    try:
        result = subprocess.run(
            argv,
            capture_output=capture,
            text=True,
            input=input,
            env=full_env,
            cwd=str(cwd) if cwd else None,
            timeout=timeout,
        )
    except FileNotFoundError:
        return CommandResult(
            argv=argv,
            returncode=COMMAND_NOT_FOUND,
            stderr=f"{argv[0]}: command not found",
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            argv=argv,
            returncode=COMMAND_TIMED_OUT,
            stderr=f"{argv[0]} timed out after {timeout}s",
        )

    logger.debug(f"Exit {result.returncode}: {argv[0]}")
    return CommandResult(
        argv=argv,
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


def privileged(argv: Sequence[str]) -> List[str]:
    """
    Prefix a command with sudo when not running as root.

    Args:
        argv: Command that needs root privileges

    Returns:
        Command, prefixed with 'sudo' if required and available
    """
    argv = list(argv)
    if os.geteuid() == 0 or not is_available("sudo"):
        return argv
    return ["sudo", *argv]


__all__ = [
    "CommandResult",
    "find_command",
    "is_available",
    "run_command",
    "privileged",
]
