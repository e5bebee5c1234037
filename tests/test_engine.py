"""
Tests for the step engine — confirmation flow, abort-on-failure, cleanup, dependencies.
"""

import pytest

from devsetup.adapters.registry import default_registry
from devsetup.core.engine.executor import execute_plan, run_steps
from devsetup.core.errors import StepFailedError
from devsetup.core.models.action import Action
from devsetup.core.services import steps
from devsetup.core.services.steps import STEP_TABLE, InstallationStep, StepPlan, get_step
from tests.helpers import ScriptedConsole

EDITOR_CLEANUP = ["editor-build:remove-tree", "editor-build:remove-archive"]


@pytest.fixture(autouse=True)
def zsh_present(monkeypatch):
    monkeypatch.setattr(steps, "resolve_shell_binary", lambda shell: "/usr/bin/zsh")
    monkeypatch.setattr(steps, "login_shell_of", lambda user: "/bin/bash")


def _editor_only(registry, ctx):
    console = ScriptedConsole({"Neovim 0.10.0": True})
    return run_steps(ctx, [get_step("editor-build")], registry, console)


class TestConfirmation:
    def test_all_declined_runs_nothing(self, make_context, mock_registry, mocks):
        console = ScriptedConsole()
        report = run_steps(make_context(), STEP_TABLE, mock_registry, console)

        assert all(m.call_count == 0 for m in mocks.values())
        assert report.status_of("baseline-tools") == "declined"
        # Never asked: its dependency did not run
        assert report.status_of("editor-config") == "not-offered"
        assert len(console.questions) == 7
        assert console.banners == []

    def test_accepted_step_shows_banner_then_runs(self, make_context, mock_registry, mocks):
        console = ScriptedConsole({"curl and git": True})
        report = run_steps(make_context(), STEP_TABLE, mock_registry, console)

        assert console.banners == ["Installing curl and git"]
        assert mocks["shell"].action_ids == ["baseline-tools:install"]
        assert report.ran_steps == ["baseline-tools"]

    def test_assume_yes_skips_questions(self, make_context, mock_registry, mocks):
        console = ScriptedConsole()
        report = run_steps(make_context(), STEP_TABLE, mock_registry, console, assume_yes=True)

        assert console.questions == []
        assert report.ran_steps == [s.id for s in STEP_TABLE]

    def test_questions_in_table_order(self, make_context, mock_registry):
        console = ScriptedConsole({"Neovim 0.10.0": True})
        run_steps(make_context(), STEP_TABLE, mock_registry, console)
        assert console.questions == [
            "Install curl and git?",
            "Install development packages?",
            "Set up zsh?",
            "Set up scripts directory?",
            "Install Neovim 0.10.0 from source?",
            "Set up Neovim configuration from https://github.com/manitofigh/nvim.git?",
            "Set up git configuration?",
            "Install Oh My Zsh?",
        ]


class TestAbortOnFailure:
    def test_later_steps_not_offered(self, make_context, mock_registry, mocks):
        mocks["shell"].fail("baseline-tools:install", "dnf exited with code 1")
        console = ScriptedConsole({"?": True})

        with pytest.raises(StepFailedError) as exc:
            run_steps(make_context(), STEP_TABLE, mock_registry, console)

        assert exc.value.step_id == "baseline-tools"
        assert "dnf exited with code 1" in str(exc.value)
        assert console.questions == ["Install curl and git?"]
        assert mocks["filesystem"].call_count == 0

    def test_stops_inside_step(self, make_context, mock_registry, mocks):
        mocks["git"].fail("git-identity:user.name")
        with pytest.raises(StepFailedError):
            run_steps(make_context(), [get_step("git-identity")], mock_registry, ScriptedConsole({"?": True}))
        assert mocks["git"].action_ids == ["git-identity:user.name"]

    def test_plan_error_aborts(self, make_context, mock_registry, mocks, monkeypatch):
        monkeypatch.setattr(steps, "resolve_shell_binary", lambda shell: None)
        with pytest.raises(StepFailedError, match="not installed"):
            run_steps(make_context(), [get_step("login-shell")], mock_registry, ScriptedConsole({"?": True}))
        assert mocks["shell"].call_count == 0


class TestSkips:
    def test_already_satisfied_step_is_skipped(self, make_context, mock_registry, mocks, monkeypatch):
        monkeypatch.setattr(steps, "login_shell_of", lambda user: "/usr/bin/zsh")
        console = ScriptedConsole({"zsh": True})
        report = run_steps(make_context(), [get_step("login-shell")], mock_registry, console)

        assert report.status_of("login-shell") == "skipped"
        assert mocks["shell"].call_count == 0
        assert any("already the login shell" in n for n in console.notices)

    def test_skipped_build_still_offers_config(self, make_context, mock_registry):
        def already_built(ctx):
            return StepPlan(skip_reason="Neovim already installed")

        table = [
            InstallationStep(id="editor-build", prompt="Build?", banner="b", build=already_built),
            get_step("editor-config"),
        ]
        console = ScriptedConsole({"?": True})
        report = run_steps(make_context(), table, mock_registry, console)
        assert report.status_of("editor-config") == "ok"


class TestEditorCleanup:
    def test_cleanup_after_success(self, make_context, mock_registry, mocks):
        report = _editor_only(mock_registry, make_context())
        assert mocks["filesystem"].action_ids == ["editor-build:workdir", *EDITOR_CLEANUP]
        assert report.status_of("editor-build") == "ok"

    def test_cleanup_when_install_fails(self, make_context, mock_registry, mocks):
        mocks["shell"].fail("editor-build:install", "permission denied")
        with pytest.raises(StepFailedError) as exc:
            _editor_only(mock_registry, make_context())

        assert exc.value.receipt.action_id == "editor-build:install"
        assert mocks["filesystem"].action_ids[-2:] == EDITOR_CLEANUP

    def test_no_cleanup_when_fetch_fails(self, make_context, mock_registry, mocks):
        mocks["network"].fail("editor-build:fetch", "Download failed")
        with pytest.raises(StepFailedError):
            _editor_only(mock_registry, make_context())

        assert mocks["filesystem"].action_ids == ["editor-build:workdir"]
        assert mocks["shell"].call_count == 0

    def test_cleanup_on_interrupt(self, make_context, mock_registry, mocks):
        mocks["shell"].interrupt("editor-build:compile")
        with pytest.raises(KeyboardInterrupt):
            _editor_only(mock_registry, make_context())

        assert mocks["shell"].action_ids == ["editor-build:extract", "editor-build:compile"]
        assert mocks["filesystem"].action_ids[-2:] == EDITOR_CLEANUP

    def test_cleanup_failure_fails_step(self, make_context, mock_registry, mocks):
        mocks["filesystem"].fail("editor-build:remove-tree", "busy")
        with pytest.raises(StepFailedError) as exc:
            _editor_only(mock_registry, make_context())

        assert exc.value.receipt.action_id == "editor-build:remove-tree"
        # The archive is still removed
        assert mocks["filesystem"].action_ids[-1] == "editor-build:remove-archive"


class TestExecutePlan:
    def test_returns_receipts_in_order(self, make_context, mock_registry):
        plan = StepPlan(
            actions=[
                Action(id="s:a", adapter="shell", params={"argv": ["true"]}),
                Action(id="s:b", adapter="git", params={}),
            ]
        )
        receipts = execute_plan("s", plan, mock_registry, make_context())
        assert [r.action_id for r in receipts] == ["s:a", "s:b"]

    def test_dry_run_touches_nothing(self, make_context, recorder, home):
        ctx = make_context(dry_run=True)
        report = run_steps(ctx, STEP_TABLE, default_registry(), ScriptedConsole(), assume_yes=True)

        assert recorder.calls == []
        assert list(home.iterdir()) == []
        assert all(r.skipped for r in report.receipts)

