"""
Pytest configuration and shared fixtures for dotkit tests.
"""

import shutil
import subprocess
from pathlib import Path

import pytest
import requests

from dotkit.core.platform import Platform, PlatformFamily, clear_platform_cache
from tests.mocks import FakeHost, MockDownloader

ISOLATED_VARIABLES = (
    "XDG_CONFIG_HOME",
    "XDG_DATA_HOME",
    "XDG_CACHE_HOME",
    "XDG_STATE_HOME",
    "GITHUB_USER",
    "HOMEBREW_PREFIX",
    "HOMEBREW_CELLAR",
    "HOMEBREW_REPOSITORY",
)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that touch the real host or network",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch) -> Path:
    """
    Give every test its own HOME and a clean environment.

    PATH and the HOMEBREW_* variables are restored after the test since
    provisioning code edits os.environ in place.
    """
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USER", "tester")
    monkeypatch.setenv("SHELL", "/bin/bash")
    monkeypatch.setenv("PATH", "/usr/bin:/bin")
    for name in ISOLATED_VARIABLES:
        # setenv first so monkeypatch also undoes values set during the test
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    clear_platform_cache()
    yield fake_home
    clear_platform_cache()


@pytest.fixture
def home(isolated_env: Path) -> Path:
    """The isolated home directory."""
    return isolated_env


@pytest.fixture
def downloads(monkeypatch) -> MockDownloader:
    """Replace requests.get with a recording mock."""
    downloader = MockDownloader()
    monkeypatch.setattr(requests, "get", downloader.get)
    return downloader


@pytest.fixture
def fake_host(monkeypatch, downloads) -> FakeHost:
    """Replace PATH lookups, subprocesses, and downloads with a simulated host."""
    host = FakeHost()
    host.downloads = downloads
    monkeypatch.setattr(shutil, "which", host.which)
    monkeypatch.setattr(subprocess, "run", host.run)
    return host


@pytest.fixture
def mac_platform() -> Platform:
    return Platform(PlatformFamily.MAC, "arm64")


@pytest.fixture
def linux_platform() -> Platform:
    return Platform(PlatformFamily.LINUX_APT, "x64")


@pytest.fixture
def other_platform() -> Platform:
    return Platform(PlatformFamily.OTHER, "x64")
