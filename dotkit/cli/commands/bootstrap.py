"""
Bootstrap command implementation.

Provisions the machine and applies the dotfiles.
"""

import dataclasses
import logging
import os

from dotkit.cli.utils import format_summary, print_error, print_warning, safe_print
from dotkit.config.settings import Settings, load_settings
from dotkit.core.exceptions import ConfigApplyError, FatalProvisioningError
from dotkit.provisioner import ProvisionOptions, Provisioner

logger = logging.getLogger(__name__)


def _apply_overrides(settings: Settings, args) -> Settings:
    """Apply command-line overrides on top of file settings."""
    overrides = {}
    if getattr(args, "shell", None):
        overrides["shell"] = args.shell
        logger.debug(f"Overriding shell: {args.shell}")
    if not overrides:
        return settings
    return dataclasses.replace(settings, **overrides)


def run(args) -> int:
    """
    Run the bootstrap command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for a fatal error)
    """
    logger.debug(f"Arguments: {args}")

    try:
        settings = load_settings(args.config, os.environ)
    except FatalProvisioningError as e:
        logger.error(f"Failed to load settings: {e}")
        print_error("Failed to load settings", str(e))
        return 1

    settings = _apply_overrides(settings, args)
    options = ProvisionOptions(
        skip_tools=getattr(args, "skip_tools", False),
        skip_shell=getattr(args, "skip_shell", False),
        source_dir=getattr(args, "source", None),
    )

    try:
        report = Provisioner(settings, options).run()
    except ConfigApplyError as e:
        logger.error("Applying the configuration failed")
        print_error("Applying the configuration failed", str(e))
        return 1
    except FatalProvisioningError as e:
        logger.error(f"Bootstrap aborted: {e}")
        print_error("Bootstrap aborted", str(e))
        return 1

    if not args.quiet:
        safe_print("")
        safe_print(format_summary(report))

    if report.tools.failed:
        names = ", ".join(r.name for r in report.tools.failed)
        print_warning(f"Some tools could not be installed: {names}")

    return 0
