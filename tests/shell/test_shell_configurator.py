"""
Tests for login shell configuration.
"""

import pytest

from dotkit.core.report import StepStatus
from dotkit.shell.configurator import ShellConfigurator, current_login_shell

ZSH = "/fake/bin/zsh"


@pytest.fixture
def shells_file(tmp_path):
    path = tmp_path / "shells"
    path.write_text("/bin/sh\n/bin/bash\n")
    return path


def configurator(shells_file, shell="/bin/bash"):
    return ShellConfigurator(shells_file, env={"SHELL": shell, "USER": "tester"})


class TestCurrentLoginShell:
    def test_from_env(self):
        assert current_login_shell({"SHELL": "/bin/zsh"}) == "/bin/zsh"

    def test_unset(self):
        assert current_login_shell({}) == ""


class TestEnsureDefaultShell:
    """Tests for ShellConfigurator.ensure_default_shell()."""

    def test_already_default(self, shells_file, fake_host):
        """Test nothing runs when the login shell already matches."""
        result = configurator(shells_file, "/usr/bin/zsh").ensure_default_shell("zsh")

        assert result.status is StepStatus.OK
        assert "already" in result.message
        assert fake_host.calls == []

    def test_target_not_installed(self, shells_file, fake_host):
        result = configurator(shells_file).ensure_default_shell("zsh")

        assert result.status is StepStatus.SKIPPED
        assert fake_host.calls == []

    def test_registers_and_changes(self, shells_file, fake_host):
        """Test an unlisted shell is added to the shells file before chsh."""
        fake_host.add_commands("zsh")

        result = configurator(shells_file).ensure_default_shell("zsh")

        assert result.status is StepStatus.OK
        assert fake_host.lines == [f"tee -a {shells_file}", f"chsh -s {ZSH}"]
        assert fake_host.calls[0].input == f"{ZSH}\n"

    def test_registered_shell_not_added_again(self, shells_file, fake_host):
        fake_host.add_commands("zsh")
        shells_file.write_text(f"/bin/sh\n{ZSH}\n")

        configurator(shells_file).ensure_default_shell("zsh")

        assert fake_host.lines == [f"chsh -s {ZSH}"]

    def test_chsh_failure_is_not_fatal(self, shells_file, fake_host):
        """Test a chsh failure becomes a failed step with a manual hint."""
        fake_host.add_commands("zsh")
        fake_host.on("chsh", returncode=1, stderr="PAM: Authentication failure")

        result = configurator(shells_file).ensure_default_shell("zsh")

        assert result.status is StepStatus.FAILED
        assert result.hint == f"sudo chsh -s {ZSH} tester"

    def test_register_failure_still_tries_chsh(self, shells_file, fake_host):
        fake_host.add_commands("zsh")
        fake_host.on("tee -a", returncode=1, stderr="Permission denied")

        result = configurator(shells_file).ensure_default_shell("zsh")

        assert fake_host.ran("chsh")
        assert result.status is StepStatus.OK

    def test_absolute_target(self, shells_file, tmp_path, fake_host):
        fish = tmp_path / "fish"
        fish.write_text("")
        shells_file.write_text(f"{fish}\n")

        result = configurator(shells_file).ensure_default_shell(str(fish))

        assert result.status is StepStatus.OK
        assert fake_host.lines == [f"chsh -s {fish}"]


class TestRegistration:
    def test_missing_shells_file(self, tmp_path):
        """Test an unreadable shells file means not registered."""
        config = ShellConfigurator(tmp_path / "absent", env={})
        assert not config.is_registered(tmp_path / "zsh")
