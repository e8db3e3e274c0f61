"""
Tests for configuration source selection and the chezmoi hand-off.
"""

import pytest

from dotkit.config.settings import Settings
from dotkit.core.exceptions import ConfigApplyError, FatalProvisioningError
from dotkit.core.report import StepStatus
from dotkit.dotfiles.applier import (
    ConfigApplier,
    ConfigurationTarget,
    SourceMode,
    has_source_marker,
    lock_plugins,
    operator_identity,
    resolve_target,
)


class TestOperatorIdentity:
    """Tests for operator_identity() precedence."""

    def test_github_user_wins(self):
        env = {"GITHUB_USER": "octocat", "USER": "local"}
        settings = Settings(github_user="configured")
        assert operator_identity(settings, env) == "octocat"

    def test_setting_before_user(self):
        settings = Settings(github_user="configured")
        assert operator_identity(settings, {"USER": "local"}) == "configured"

    def test_user(self):
        assert operator_identity(None, {"USER": "local"}) == "local"

    def test_empty_github_user_ignored(self):
        assert operator_identity(None, {"GITHUB_USER": "", "USER": "local"}) == "local"

    def test_login_name_fallback(self, monkeypatch):
        monkeypatch.setattr("getpass.getuser", lambda: "login")
        assert operator_identity(None, {}) == "login"


class TestResolveTarget:
    """Tests for resolve_target()."""

    def test_marker_file_selects_local(self, tmp_path):
        (tmp_path / ".chezmoiroot").write_text("home\n")

        target = resolve_target(tmp_path, env={"USER": "tester"})

        assert target.mode is SourceMode.LOCAL
        assert target.location == str(tmp_path.resolve())

    def test_marker_directory_selects_local(self, tmp_path):
        (tmp_path / ".chezmoiroot").mkdir()
        assert has_source_marker(tmp_path)
        assert resolve_target(tmp_path, env={}).mode is SourceMode.LOCAL

    def test_remote_from_github_user(self, tmp_path):
        target = resolve_target(tmp_path, env={"GITHUB_USER": "octocat"})

        assert target == ConfigurationTarget(
            SourceMode.REMOTE, "https://github.com/octocat/dotconfig.git"
        )

    def test_remote_from_user(self, tmp_path):
        target = resolve_target(tmp_path, env={"USER": "tester"})
        assert target.location == "https://github.com/tester/dotconfig.git"

    def test_repo_name_setting(self, tmp_path):
        target = resolve_target(
            tmp_path, Settings(repo_name="dotfiles"), env={"USER": "tester"}
        )
        assert target.location == "https://github.com/tester/dotfiles.git"

    def test_repo_url_setting(self, tmp_path):
        url = "git@example.com:me/config.git"
        target = resolve_target(tmp_path, Settings(repo_url=url), env={"USER": "x"})
        assert target == ConfigurationTarget.remote(url)

    def test_marker_beats_settings(self, tmp_path):
        (tmp_path / ".chezmoiroot").write_text("")
        target = resolve_target(tmp_path, Settings(repo_url="https://x/y.git"), env={})
        assert target.mode is SourceMode.LOCAL


class TestConfigApplier:
    """Tests for ConfigApplier."""

    def test_local_command(self):
        target = ConfigurationTarget.local("/src/dotconfig")
        assert ConfigApplier().build_command(target) == [
            "chezmoi",
            "init",
            "--source=/src/dotconfig",
            "--apply",
        ]

    def test_remote_command(self):
        target = ConfigurationTarget.remote("https://github.com/octocat/dotconfig.git")
        assert ConfigApplier().build_command(target) == [
            "chezmoi",
            "init",
            "--apply",
            "https://github.com/octocat/dotconfig.git",
        ]

    def test_apply(self, fake_host):
        fake_host.on("chezmoi init", stdout="applied 12 files\n")

        ConfigApplier().apply(ConfigurationTarget.remote("https://x/y.git"))

        assert fake_host.lines == ["chezmoi init --apply https://x/y.git"]

    def test_apply_failure_keeps_output(self, fake_host):
        """Test chezmoi's diagnostics are surfaced verbatim."""
        fake_host.on(
            "chezmoi init",
            returncode=1,
            stdout="cloning...\n",
            stderr="chezmoi: template: .gitconfig.tmpl:3: undefined variable\n",
        )

        with pytest.raises(ConfigApplyError) as exc_info:
            ConfigApplier().apply(ConfigurationTarget.remote("https://x/y.git"))

        error = exc_info.value
        assert isinstance(error, FatalProvisioningError)
        assert "undefined variable" in error.output
        assert "cloning..." in error.output
        assert "exit code 1" in str(error)


class TestLockPlugins:
    """Tests for lock_plugins()."""

    def test_manager_missing(self, fake_host):
        result = lock_plugins()

        assert result.status is StepStatus.SKIPPED
        assert fake_host.calls == []

    def test_lock(self, fake_host):
        fake_host.add_commands("sheldon")

        result = lock_plugins()

        assert result.ok
        assert fake_host.lines == ["sheldon lock"]

    def test_lock_failure_is_not_fatal(self, fake_host):
        fake_host.add_commands("sheldon")
        fake_host.on("sheldon lock", returncode=1, stderr="failed to clone")

        result = lock_plugins()

        assert result.status is StepStatus.FAILED
        assert "failed to clone" in result.message
