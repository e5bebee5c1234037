"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

import pytest

from devsetup.adapters.mock import MockAdapter
from devsetup.adapters.registry import AdapterRegistry
from devsetup.core.models.platform import PLATFORMS, PlatformId
from devsetup.core.models.privilege import PrivilegeMode
from devsetup.core.models.settings import ProvisionSettings
from devsetup.core.services.steps import ProvisionContext
from tests.helpers import CommandRecorder

ADAPTER_NAMES = ("shell", "filesystem", "git", "network")


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """An empty home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path: Path) -> ProvisionSettings:
    return ProvisionSettings(build_dir=str(tmp_path / "build"))


@pytest.fixture
def mocks() -> dict[str, MockAdapter]:
    return {name: MockAdapter(adapter_name=name) for name in ADAPTER_NAMES}


@pytest.fixture
def mock_registry(mocks: dict[str, MockAdapter]) -> AdapterRegistry:
    registry = AdapterRegistry()
    for adapter in mocks.values():
        registry.register(adapter)
    return registry


@pytest.fixture
def make_context(home: Path, settings: ProvisionSettings):
    """Factory for ProvisionContext with sensible test defaults."""

    def _make(
        platform: PlatformId = PlatformId.FEDORA,
        privilege: PrivilegeMode | None = None,
        dry_run: bool = False,
        **overrides,
    ) -> ProvisionContext:
        return ProvisionContext(
            platform=PLATFORMS[platform],
            privilege=privilege or PrivilegeMode(elevated=True),
            settings=overrides.pop("settings", settings),
            home=str(home),
            user=overrides.pop("user", "dev"),
            dry_run=dry_run,
        )

    return _make


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> CommandRecorder:
    """Replace ``subprocess.run`` for the duration of a test."""
    rec = CommandRecorder()
    monkeypatch.setattr(subprocess, "run", rec)
    return rec


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch, home: Path, tmp_path: Path) -> Path:
    """HOME and XDG config pointed at temporary directories."""
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USER", "dev")
    monkeypatch.delenv("SUDO_USER", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("DEVSETUP_CONFIG", raising=False)
    monkeypatch.delenv("DEVSETUP_LOG_FILE", raising=False)
    monkeypatch.delenv("DEVSETUP_LOG_LEVEL", raising=False)
    return home


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
