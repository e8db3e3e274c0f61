"""
Install-script downloads.

Remote installers are fetched once into memory and handed to their
interpreter, on stdin or with -c for installers that prompt. There is no
retry: re-running dotkit is the retry mechanism.
"""

import logging
from typing import Mapping, Optional, Sequence

import requests
from requests.exceptions import RequestException

from dotkit.core.commands import CommandResult, run_command
from dotkit.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def fetch_script(url: str, timeout: int = DEFAULT_TIMEOUT) -> str:
    """
    Fetch an install script over HTTPS.

    Args:
        url: Script URL
        timeout: Request timeout in seconds

    Returns:
        Script body as text

    Raises:
        DownloadError: If the request fails, returns an error status, or is empty
        ValueError: If url is empty
    """
    if not url:
        raise ValueError("URL cannot be empty")

    logger.debug(f"Fetching install script from {url}")

    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
    except RequestException as e:
        raise DownloadError(f"Failed to fetch {url}: {e}") from e

    body = response.text
    if not body.strip():
        raise DownloadError(f"Install script at {url} is empty")

    return body


def run_remote_script(
    url: str,
    interpreter: str = "sh",
    args: Sequence[str] = (),
    env: Optional[Mapping[str, str]] = None,
    interactive: bool = False,
) -> CommandResult:
    """
    Fetch an install script and run it.

    By default the script is piped in, like `curl URL | sh -s -- ARGS`, and
    its output captured. Interactive scripts are passed with `-c` instead,
    like `sh -c "$(curl URL)" -- ARGS`, so they keep the terminal for
    prompts such as sudo's password request.

    Args:
        url: Script URL
        interpreter: Shell that executes the script
        args: Arguments passed to the script
        env: Extra environment variables for the script
        interactive: Leave stdin and output attached to the terminal

    Returns:
        CommandResult of the interpreter (no output when interactive)

    Raises:
        DownloadError: If the script cannot be fetched
    """
    script = fetch_script(url)
    logger.info(f"Running install script from {url}")
    if interactive:
        return run_command(
            [interpreter, "-c", script, "--", *args], env=env, capture=False
        )
    return run_command([interpreter, "-s", "--", *args], env=env, input=script)


__all__ = ["fetch_script", "run_remote_script", "DEFAULT_TIMEOUT"]
