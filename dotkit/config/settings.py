"""
Operator settings for dotkit.

Settings come from an optional YAML file; every key has a default, so a
fresh machine with no file at all provisions with the defaults.

Example config.yaml:
    github_user: octocat
    repo_name: dotconfig
    shell: zsh
    skip_tools:
      - pyenv
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from dotkit.core.directory import xdg_dir
from dotkit.core.exceptions import SettingsError

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "config.yaml"


@dataclass
class Settings:
    """
    Provisioning settings.

    Attributes:
        github_user: Account hosting the dotfiles repository
            (GITHUB_USER, then USER, then the login name when unset)
        repo_name: Dotfiles repository name under that account
        repo_url: Full repository URL; overrides github_user/repo_name
        shell: Login shell to configure
        skip_tools: Tool names to leave out of the core tool set
    """

    github_user: Optional[str] = None
    repo_name: str = "dotconfig"
    repo_url: Optional[str] = None
    shell: str = "zsh"
    skip_tools: List[str] = field(default_factory=list)


_EXPECTED_TYPES = {
    "github_user": str,
    "repo_name": str,
    "repo_url": str,
    "shell": str,
    "skip_tools": list,
}


def default_settings_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """Get the default settings file path ($XDG_CONFIG_HOME/dotkit/config.yaml)."""
    return xdg_dir("XDG_CONFIG_HOME", env) / "dotkit" / SETTINGS_FILENAME


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        SettingsError: If the file is required but missing, unreadable, or
            not a YAML mapping
    """
    if not config_file.exists():
        if required:
            raise SettingsError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Cannot read {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise SettingsError(f"{config_file} must contain a mapping at top level")
    return config


def settings_from_dict(data: Mapping[str, Any], source: str = "<dict>") -> Settings:
    """
    Build Settings from a parsed configuration mapping.

    Unknown keys are logged and ignored.

    Args:
        data: Parsed configuration
        source: Where the data came from, for error messages

    Returns:
        Settings instance

    Raises:
        SettingsError: If a known key has the wrong type
    """
    known = {f.name for f in fields(Settings)}
    values: Dict[str, Any] = {}

    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown setting '{key}' in {source}")
            continue
        if value is None:
            continue
        expected = _EXPECTED_TYPES[key]
        if not isinstance(value, expected):
            raise SettingsError(
                f"Setting '{key}' in {source} must be {expected.__name__}, "
                f"got {type(value).__name__}"
            )
        if key == "skip_tools":
            if not all(isinstance(item, str) for item in value):
                raise SettingsError(f"Setting 'skip_tools' in {source} must list names")
            value = list(value)
        values[key] = value

    return Settings(**values)


def load_settings(
    config_file: Optional[Path] = None, env: Optional[Mapping[str, str]] = None
) -> Settings:
    """
    Load settings from an explicit file or the default location.

    An explicitly given file must exist; the default file is optional.

    Args:
        config_file: Explicit settings file (e.g. from --config)
        env: Environment mapping used to find the default location

    Returns:
        Settings instance

    Raises:
        SettingsError: If the file is invalid, or explicit and missing
    """
    if config_file is not None:
        data = load_yaml_config(config_file, required=True)
        return settings_from_dict(data, str(config_file))

    path = default_settings_path(env)
    data = load_yaml_config(path, required=False)
    return settings_from_dict(data, str(path))
