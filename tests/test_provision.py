"""
Tests for the provision use case — privilege, platform resolution and completion.
"""

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from devsetup.core.errors import PrivilegeConflictError, SelectionError
from devsetup.core.models.platform import PlatformId
from devsetup.core.services import privilege, shell_config, steps
from devsetup.core.use_cases.provision import resolve_platform, run_provision
from tests.helpers import ScriptedConsole


@pytest.fixture
def as_user(monkeypatch):
    monkeypatch.setattr(privilege.os, "geteuid", lambda: 1000)
    monkeypatch.setattr(privilege.shutil, "which", lambda name: f"/usr/bin/{name}")


@pytest.fixture
def as_root(monkeypatch):
    monkeypatch.setattr(privilege.os, "geteuid", lambda: 0)


class TestResolvePlatform:
    def test_menu_choice(self):
        assert resolve_platform(None, ScriptedConsole(choice="3")).id == PlatformId.ARCH

    def test_explicit_value_skips_menu(self):
        class NoMenu(ScriptedConsole):
            def choose(self, title, options):
                raise AssertionError("menu shown")

        assert resolve_platform("ubuntu", NoMenu()).id == PlatformId.UBUNTU

    def test_invalid_menu_choice(self):
        with pytest.raises(SelectionError):
            resolve_platform(None, ScriptedConsole(choice="9"))


class TestRunProvision:
    def test_reduced_mode_warns(self, as_user, mock_registry, settings, home: Path):
        console = ScriptedConsole()
        run_provision(
            console=console, settings=settings, no_sudo=True,
            registry=mock_registry, home=str(home), user="dev",
        )
        assert console.warnings[0] == "Running without sudo. Some features may not work."

    def test_conflict_before_menu(self, as_root, mock_registry):
        class NoMenu(ScriptedConsole):
            def choose(self, title, options):
                raise AssertionError("menu shown")

        with pytest.raises(PrivilegeConflictError):
            run_provision(console=NoMenu(), no_sudo=True, registry=mock_registry)

    def test_completion_message(self, as_root, mock_registry, settings, home: Path):
        console = ScriptedConsole()
        report = run_provision(
            console=console, settings=settings, registry=mock_registry, home=str(home), user="dev",
        )
        assert console.notices[0] == "Setting up development environment for fedora"
        assert console.banners[-1] == "Setup complete!"
        assert console.notices[-1] == (
            "Please restart your terminal or run 'source ~/.zshrc' to apply the changes."
        )
        assert report.ran_steps == []

    def test_sudo_wrapper_reaches_commands(self, as_user, mock_registry, mocks, settings, home: Path):
        console = ScriptedConsole({"curl and git": True}, choice="1")
        run_provision(
            console=console, settings=settings, registry=mock_registry, home=str(home), user="dev",
        )
        assert [c.action.params["argv"] for c in mocks["shell"].call_log] == [
            ["sudo", "apt", "update"],
            ["sudo", "apt", "install", "-y", "curl", "git"],
        ]

    def test_run_summary_logged(self, as_root, caplog, mock_registry, settings, home: Path):
        caplog.set_level(logging.INFO, logger="devsetup.core.use_cases.provision")
        console = ScriptedConsole({"curl and git": True})
        run_provision(
            console=console, settings=settings, registry=mock_registry, home=str(home), user="dev",
        )
        assert "Steps run: baseline-tools (1 actions)" in caplog.text

    def test_dry_run_warning(self, as_root, mock_registry, settings, home: Path):
        console = ScriptedConsole()
        run_provision(
            console=console, settings=settings, dry_run=True,
            registry=mock_registry, home=str(home), user="dev",
        )
        assert "Dry run: nothing will be executed." in console.warnings


class TestTargetAccount:
    def test_sudo_user_gets_own_home(self, as_root, monkeypatch, mock_registry, mocks, settings, tmp_path: Path):
        alice_home = tmp_path / "alice"
        monkeypatch.setenv("SUDO_USER", "alice")
        monkeypatch.setenv("HOME", str(tmp_path / "root"))
        monkeypatch.setattr(
            shell_config.pwd, "getpwnam",
            lambda name: SimpleNamespace(pw_dir=str(alice_home), pw_shell="/bin/bash"),
        )
        monkeypatch.setattr(steps, "resolve_shell_binary", lambda shell: "/usr/bin/zsh")

        console = ScriptedConsole({"Set up zsh": True, "scripts directory": True})
        run_provision(console=console, settings=settings, registry=mock_registry)

        assert [c.action.params["argv"] for c in mocks["shell"].call_log] == [
            ["chsh", "-s", "/usr/bin/zsh", "alice"],
        ]
        paths = [c.action.params["path"] for c in mocks["filesystem"].call_log]
        assert paths == [str(alice_home / "scripts"), str(alice_home / ".zshrc")]

    def test_plain_user_keeps_home_env(self, monkeypatch, tmp_path: Path):
        monkeypatch.delenv("SUDO_USER", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setattr(shell_config.pwd, "getpwnam", lambda name: pytest.fail("password database consulted"))
        assert shell_config.home_of("dev") == str(tmp_path)
