"""
Default tool catalog.

The configuration tool (chezmoi) is bootstrapped first and on its own; the
core tool set follows in the order listed here. Order matters whenever a
later tool builds with something an earlier one provides.

Script installers that accept a target directory are pointed at the user
bin directory so they never need root.
"""

from pathlib import Path
from typing import Iterable, List

from dotkit.packages.base import Ecosystem
from dotkit.tools.strategy import (
    EcosystemPackage,
    FromSourceBuild,
    RemoteScript,
    ToolSpec,
)

CHEZMOI_SCRIPT_URL = "https://get.chezmoi.io"
SHELDON_SCRIPT_URL = "https://rossmacarthur.github.io/install/crate.sh"
STARSHIP_SCRIPT_URL = "https://starship.rs/install.sh"
ZOXIDE_SCRIPT_URL = "https://raw.githubusercontent.com/ajeetdsouza/zoxide/main/install.sh"


def _brew(package: str) -> EcosystemPackage:
    return EcosystemPackage(Ecosystem.HOMEBREW, package)


def _apt(package: str) -> EcosystemPackage:
    return EcosystemPackage(Ecosystem.APT, package)


def _packaged(name: str, probe: str = "", apt_package: str = "", **kwargs) -> ToolSpec:
    """A tool packaged under the same name by Homebrew and APT."""
    return ToolSpec(
        name=name,
        probe_command=probe or name,
        strategies=(_brew(name), _apt(apt_package or name)),
        **kwargs,
    )


def config_tool_spec(bin_dir: Path) -> ToolSpec:
    """
    Get the specification of the configuration-application tool.

    Args:
        bin_dir: Directory the fallback installer writes the binary to
    """
    return ToolSpec(
        name="chezmoi",
        probe_command="chezmoi",
        strategies=(
            _brew("chezmoi"),
            RemoteScript(CHEZMOI_SCRIPT_URL, args=("-b", str(bin_dir))),
        ),
        description="dotfile manager",
    )


def core_tool_specs(bin_dir: Path) -> List[ToolSpec]:
    """
    Get the baseline tool set in installation order.

    Args:
        bin_dir: Directory script installers write binaries to

    Returns:
        Tool specifications
    """
    return [
        _packaged("curl", description="URL transfer tool"),
        _packaged("git", description="version control"),
        _packaged("zsh", description="login shell"),
        _packaged("tmux", description="terminal multiplexer"),
        _packaged("jq", description="JSON processor"),
        _packaged("fzf", description="fuzzy finder"),
        _packaged("ripgrep", probe="rg", description="better grep"),
        _packaged("bat", installs_as="batcat", description="better cat"),
        _packaged(
            "fd", apt_package="fd-find", installs_as="fdfind", description="better find"
        ),
        ToolSpec(
            name="sheldon",
            probe_command="sheldon",
            strategies=(
                _brew("sheldon"),
                RemoteScript(
                    SHELDON_SCRIPT_URL,
                    args=("--repo", "rossmacarthur/sheldon", "--to", str(bin_dir)),
                    interpreter="bash",
                ),
            ),
            description="zsh plugin manager",
        ),
        ToolSpec(
            name="starship",
            probe_command="starship",
            strategies=(
                _brew("starship"),
                RemoteScript(STARSHIP_SCRIPT_URL, args=("-y", "-b", str(bin_dir))),
            ),
            description="prompt",
        ),
        ToolSpec(
            name="eza",
            probe_command="eza",
            strategies=(_brew("eza"), FromSourceBuild("cargo", "eza")),
            description="better ls",
        ),
        ToolSpec(
            name="zoxide",
            probe_command="zoxide",
            strategies=(
                _brew("zoxide"),
                RemoteScript(
                    ZOXIDE_SCRIPT_URL, args=("--bin-dir", str(bin_dir)), interpreter="bash"
                ),
            ),
            description="better cd",
        ),
        ToolSpec(
            name="git-delta",
            probe_command="delta",
            strategies=(_brew("git-delta"),),
            description="better git diffs",
        ),
        ToolSpec(
            name="pyenv",
            probe_command="pyenv",
            strategies=(_brew("pyenv"),),
            description="python version manager",
        ),
    ]


def filter_specs(specs: Iterable[ToolSpec], skip: Iterable[str]) -> List[ToolSpec]:
    """
    Drop tools by name, preserving order.

    Args:
        specs: Tool specifications
        skip: Tool names to leave out

    Returns:
        Remaining specifications
    """
    skipped = set(skip)
    return [spec for spec in specs if spec.name not in skipped]


__all__ = ["config_tool_spec", "core_tool_specs", "filter_specs"]
