"""Login shell configuration."""

from dotkit.shell.configurator import ShellConfigurator, current_login_shell

__all__ = ["ShellConfigurator", "current_login_shell"]
