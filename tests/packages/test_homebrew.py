"""
Tests for the Homebrew adapter.
"""

import os
from unittest.mock import patch

import pytest

from dotkit.core.exceptions import PackageInstallError, PackageManagerUnavailableError
from dotkit.core.platform import Platform, PlatformFamily
from dotkit.packages.base import Ecosystem, InstallSession
from dotkit.packages.homebrew import INSTALL_SCRIPT_URL, HomebrewAdapter


@pytest.fixture
def adapter(mac_platform):
    return HomebrewAdapter(mac_platform)


class TestPrefix:
    """Tests for the Homebrew prefix per platform."""

    def test_apple_silicon(self):
        adapter = HomebrewAdapter(Platform(PlatformFamily.MAC, "arm64"))
        assert str(adapter.prefix()) == "/opt/homebrew"

    def test_intel_mac(self):
        adapter = HomebrewAdapter(Platform(PlatformFamily.MAC, "x64"))
        assert str(adapter.prefix()) == "/usr/local"

    def test_linuxbrew_default(self, linux_platform, tmp_path):
        """Test the shared Linuxbrew prefix is the default."""
        system = tmp_path / "linuxbrew"
        with patch("dotkit.packages.homebrew.LINUXBREW_PREFIX", system):
            assert HomebrewAdapter(linux_platform).prefix() == system

    def test_linuxbrew_user_install(self, linux_platform, tmp_path, home):
        """Test a per-user ~/.linuxbrew is used when only it has brew."""
        user_brew = home / ".linuxbrew" / "bin" / "brew"
        user_brew.parent.mkdir(parents=True)
        user_brew.write_text("")

        with patch("dotkit.packages.homebrew.LINUXBREW_PREFIX", tmp_path / "none"):
            assert HomebrewAdapter(linux_platform).prefix() == home / ".linuxbrew"


class TestEnsurePresent:
    """Tests for HomebrewAdapter.ensure_present()."""

    def test_already_installed(self, adapter, fake_host):
        """Test an existing brew is used as-is."""
        fake_host.add_commands("brew")
        session = InstallSession()

        adapter.ensure_present(session)

        assert session.ecosystem_ready
        assert fake_host.calls == []
        assert fake_host.downloads.request_history == []

    def test_bootstraps_brew(self, adapter, fake_host):
        """Test the official installer runs."""
        fake_host.on(INSTALL_SCRIPT_URL, provides=["brew"])
        session = InstallSession()

        adapter.ensure_present(session)

        assert session.ecosystem_ready
        assert fake_host.downloads.request_history == [INSTALL_SCRIPT_URL]
        assert fake_host.calls[0].argv[0] == "bash"

    def test_installer_keeps_terminal(self, adapter, fake_host):
        """Test the installer can prompt for the sudo password."""
        fake_host.on(INSTALL_SCRIPT_URL, provides=["brew"])

        adapter.ensure_present(InstallSession())

        call = fake_host.calls[0]
        assert call.argv[:2] == ["bash", "-c"]
        assert INSTALL_SCRIPT_URL in call.argv[2]
        assert call.argv[3] == "--"
        assert call.input is None
        assert not call.captured
        assert "NONINTERACTIVE" not in (call.env or {})

    def test_bootstrap_activates_environment(self, adapter, fake_host):
        """Test PATH and HOMEBREW_* point at the new prefix."""
        fake_host.on(INSTALL_SCRIPT_URL, provides=["brew"])

        adapter.ensure_present(InstallSession())

        assert os.environ["HOMEBREW_PREFIX"] == "/opt/homebrew"
        assert os.environ["HOMEBREW_CELLAR"] == "/opt/homebrew/Cellar"
        entries = os.environ["PATH"].split(os.pathsep)
        assert entries[:2] == ["/opt/homebrew/bin", "/opt/homebrew/sbin"]

    def test_installer_fails(self, adapter, fake_host):
        """Test a failing installer makes the ecosystem unavailable."""
        fake_host.on(INSTALL_SCRIPT_URL, returncode=1)
        session = InstallSession()

        with pytest.raises(PackageManagerUnavailableError, match="exited with 1"):
            adapter.ensure_present(session)

        assert not session.ecosystem_ready

    def test_installer_unreachable(self, adapter, fake_host):
        fake_host.downloads.make_unreachable(INSTALL_SCRIPT_URL)

        with pytest.raises(PackageManagerUnavailableError, match="download"):
            adapter.ensure_present(InstallSession())

    def test_installed_but_not_found(self, adapter, fake_host):
        """Test brew still missing after a clean installer exit is an error."""
        with pytest.raises(PackageManagerUnavailableError, match="not found"):
            adapter.ensure_present(InstallSession())


class TestInstall:
    """Tests for HomebrewAdapter.install()."""

    def test_install(self, adapter, fake_host):
        """Test brew install runs without auto-update."""
        fake_host.on("brew install jq", provides=["jq"])

        adapter.install("jq", InstallSession())

        call = fake_host.calls[0]
        assert call.argv == ["brew", "install", "jq"]
        assert call.env["HOMEBREW_NO_AUTO_UPDATE"] == "1"

    def test_install_failure(self, adapter, fake_host):
        """Test a failed install raises with brew's output."""
        fake_host.on("brew install nope", returncode=1, stderr="No formula nope")

        with pytest.raises(PackageInstallError) as exc_info:
            adapter.install("nope", InstallSession())

        error = exc_info.value
        assert error.manager == "brew"
        assert error.package == "nope"
        assert error.returncode == 1
        assert "No formula nope" in str(error)

    def test_ecosystem(self, adapter):
        assert adapter.ecosystem is Ecosystem.HOMEBREW
