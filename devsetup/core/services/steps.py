"""
Installation steps — the declarative step table.

Each InstallationStep pairs a yes/no prompt with a builder that turns
the run context into a StepPlan: an ordered list of Actions plus the
cleanup Actions that must run once their arming action succeeded.
Builders run right before their step executes, so checks such as
"is zsh already the login shell" see the effects of earlier steps.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from devsetup.core.models.action import Action
from devsetup.core.models.platform import PlatformProfile
from devsetup.core.models.privilege import PrivilegeMode
from devsetup.core.models.settings import ProvisionSettings
from devsetup.core.services.packages import BASELINE_PACKAGES, packages_for
from devsetup.core.services.shell_config import (
    login_shell_of,
    path_export_line,
    resolve_shell_binary,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionContext:
    """Explicit run configuration handed to every step builder."""

    platform: PlatformProfile
    privilege: PrivilegeMode
    settings: ProvisionSettings
    home: str
    user: str
    dry_run: bool = False

    @property
    def build_dir(self) -> str:
        if self.settings.build_dir:
            return self.settings.build_dir
        # one directory per uid
        return str(Path(tempfile.gettempdir()) / f"devsetup-build-{os.getuid()}")

    def home_path(self, raw: str) -> str:
        """Absolute path for a home-relative setting."""
        if raw.startswith("/"):
            return raw
        return str(Path(self.home) / raw)


@dataclass
class StepPlan:
    """What one step will do.

    ``cleanup`` runs after the step, success or failure, as long as the
    action named by ``cleanup_armed_by`` succeeded. ``skip_reason`` means
    the post-condition already holds; ``error`` means the step cannot run.
    """

    actions: list[Action] = field(default_factory=list)
    cleanup: list[Action] = field(default_factory=list)
    cleanup_armed_by: str | None = None
    skip_reason: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class InstallationStep:
    id: str
    prompt: str                 # str.format() template over ProvisionSettings fields
    banner: str
    build: Callable[[ProvisionContext], StepPlan]
    depends_on: str | None = None

    def render_prompt(self, settings: ProvisionSettings) -> str:
        return self.prompt.format(**settings.model_dump())


# ── Builders ────────────────────────────────────────────────────


def _shell(step: str, verb: str, argv: list[str], name: str = "", **params) -> Action:
    return Action(
        id=f"{step}:{verb}",
        adapter="shell",
        step=step,
        name=name or " ".join(argv),
        params={"argv": argv, **params},
    )


def _fs(step: str, verb: str, operation: str, path: str, **params) -> Action:
    return Action(
        id=f"{step}:{verb}",
        adapter="filesystem",
        step=step,
        name=f"{operation} {path}",
        params={"operation": operation, "path": path, **params},
    )


def _package_actions(ctx: ProvisionContext, step: str, packages: list[str]) -> list[Action]:
    """Refresh (where the platform needs it) then one batch install."""
    actions: list[Action] = []
    update = ctx.platform.update_argv()
    if update:
        actions.append(_shell(step, "update", ctx.privilege.wrap(update)))
    actions.append(
        _shell(step, "install", ctx.privilege.wrap(ctx.platform.install_argv(packages)))
    )
    return actions


def build_baseline_tools(ctx: ProvisionContext) -> StepPlan:
    return StepPlan(actions=_package_actions(ctx, "baseline-tools", list(BASELINE_PACKAGES)))


def build_dev_packages(ctx: ProvisionContext) -> StepPlan:
    extra = ctx.settings.extra_packages.get(ctx.platform.id, [])
    return StepPlan(actions=_package_actions(ctx, "dev-packages", packages_for(ctx.platform.id, extra)))


def build_login_shell(ctx: ProvisionContext) -> StepPlan:
    """``chsh -s <shell> <user>``, skipped when already the login shell."""
    wanted = ctx.settings.login_shell
    shell_path = resolve_shell_binary(wanted)
    if shell_path is None:
        if not ctx.dry_run:
            return StepPlan(error=f"{wanted} is not installed (not found on PATH)")
        shell_path = wanted

    if login_shell_of(ctx.user) == shell_path:
        return StepPlan(skip_reason=f"{shell_path} is already the login shell of {ctx.user}")

    return StepPlan(
        actions=[_shell("login-shell", "chsh", ctx.privilege.wrap(["chsh", "-s", shell_path, ctx.user]))]
    )


def build_scripts_dir(ctx: ProvisionContext) -> StepPlan:
    scripts = ctx.settings.scripts_dir
    entry = scripts if scripts.startswith("/") else f"$HOME/{scripts}"
    return StepPlan(
        actions=[
            _fs("scripts-dir", "mkdir", "mkdir", ctx.home_path(scripts)),
            _fs(
                "scripts-dir", "path", "ensure_line",
                ctx.home_path(ctx.settings.shell_rc),
                line=path_export_line(entry, ctx.settings.login_shell),
            ),
        ]
    )


def build_editor(ctx: ProvisionContext) -> StepPlan:
    """Download, extract, compile (Release) and install the editor.

    The extracted tree and the archive are removed once the archive was
    fetched, whatever happens afterwards.
    """
    step = "editor-build"
    s = ctx.settings
    build_dir = ctx.build_dir
    archive = str(Path(build_dir) / s.editor_archive_name)
    source = str(Path(build_dir) / s.editor_source_name)

    fetch = Action(
        id=f"{step}:fetch",
        adapter="network",
        step=step,
        name=f"download {s.editor_archive}",
        params={"operation": "download", "url": s.editor_archive, "dest": archive},
    )
    return StepPlan(
        actions=[
            _fs(step, "workdir", "mkdir", build_dir),
            fetch,
            _shell(step, "extract", ["tar", "xzf", archive, "-C", build_dir]),
            _shell(step, "compile", ["make", "CMAKE_BUILD_TYPE=Release"], cwd=source),
            _shell(step, "install", ctx.privilege.wrap(["make", "install"]), cwd=source),
        ],
        cleanup=[
            _fs(step, "remove-tree", "remove", source),
            _fs(step, "remove-archive", "remove", archive),
        ],
        cleanup_armed_by=fetch.id,
    )


def build_editor_config(ctx: ProvisionContext) -> StepPlan:
    step = "editor-config"
    dest = ctx.home_path(ctx.settings.editor_config_dir)
    return StepPlan(
        actions=[
            _fs(step, "parent", "mkdir", str(Path(dest).parent)),
            Action(
                id=f"{step}:clone",
                adapter="git",
                step=step,
                name=f"clone {ctx.settings.editor_config_repo}",
                params={"operation": "clone", "url": ctx.settings.editor_config_repo, "dest": dest},
            ),
        ]
    )


def build_git_identity(ctx: ProvisionContext) -> StepPlan:
    step = "git-identity"
    return StepPlan(
        actions=[
            Action(
                id=f"{step}:{key}",
                adapter="git",
                step=step,
                name=f"git config --global {key}",
                params={"operation": "config_global", "key": key, "value": value},
            )
            for key, value in (
                ("user.name", ctx.settings.git_name),
                ("user.email", ctx.settings.git_email),
            )
        ]
    )


def build_shell_framework(ctx: ProvisionContext) -> StepPlan:
    """Unattended framework install, then overwrite its theme file."""
    step = "shell-framework"
    s = ctx.settings
    framework_dir = ctx.home_path(s.shell_framework_dir)

    actions: list[Action] = []
    if Path(framework_dir).is_dir() and not ctx.dry_run:
        logger.info("%s already present, skipping installer", framework_dir)
    else:
        actions.append(
            Action(
                id=f"{step}:install",
                adapter="network",
                step=step,
                name=f"run installer {s.shell_framework_installer}",
                params={
                    "operation": "run_script",
                    "url": s.shell_framework_installer,
                    "args": ["--unattended"],
                    "env": {"ZSH": framework_dir},
                },
            )
        )
    actions.append(
        _fs(
            step, "theme", "write",
            str(Path(framework_dir) / "themes" / f"{s.shell_theme}.zsh-theme"),
            content=s.shell_theme_content,
        )
    )
    return StepPlan(actions=actions)


STEP_TABLE: tuple[InstallationStep, ...] = (
    InstallationStep(
        id="baseline-tools",
        prompt="Install curl and git?",
        banner="Installing curl and git",
        build=build_baseline_tools,
    ),
    InstallationStep(
        id="dev-packages",
        prompt="Install development packages?",
        banner="Installing packages",
        build=build_dev_packages,
    ),
    InstallationStep(
        id="login-shell",
        prompt="Set up {login_shell}?",
        banner="Setting up zsh",
        build=build_login_shell,
    ),
    InstallationStep(
        id="scripts-dir",
        prompt="Set up scripts directory?",
        banner="Setting up scripts directory",
        build=build_scripts_dir,
    ),
    InstallationStep(
        id="editor-build",
        prompt="Install Neovim {editor_version} from source?",
        banner="Installing Neovim",
        build=build_editor,
    ),
    InstallationStep(
        id="editor-config",
        prompt="Set up Neovim configuration from {editor_config_repo}?",
        banner="Setting up Neovim configuration",
        build=build_editor_config,
        depends_on="editor-build",
    ),
    InstallationStep(
        id="git-identity",
        prompt="Set up git configuration?",
        banner="Setting up git configuration",
        build=build_git_identity,
    ),
    InstallationStep(
        id="shell-framework",
        prompt="Install Oh My Zsh?",
        banner="Installing Oh My Zsh",
        build=build_shell_framework,
    ),
)


def get_step(step_id: str) -> InstallationStep:
    for step in STEP_TABLE:
        if step.id == step_id:
            return step
    raise KeyError(step_id)
