"""
Configuration loading for dotkit.

Usage:
    from dotkit.config import load_settings

    settings = load_settings()
    print(settings.shell)
"""

from dotkit.config.settings import (
    Settings,
    default_settings_path,
    load_settings,
    load_yaml_config,
    settings_from_dict,
)

__all__ = [
    "Settings",
    "default_settings_path",
    "load_settings",
    "load_yaml_config",
    "settings_from_dict",
]
