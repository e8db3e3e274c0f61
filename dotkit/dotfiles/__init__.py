"""Configuration hand-off to chezmoi and post-apply plugin locking."""

from dotkit.dotfiles.applier import (
    ConfigApplier,
    ConfigurationTarget,
    SourceMode,
    lock_plugins,
    operator_identity,
    resolve_target,
)

__all__ = [
    "ConfigApplier",
    "ConfigurationTarget",
    "SourceMode",
    "lock_plugins",
    "operator_identity",
    "resolve_target",
]
