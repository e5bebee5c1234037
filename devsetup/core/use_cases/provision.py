"""
Provision use case — the whole run from flags to completion message.

    privilege → platform → context → step table → completion

Privilege and platform are resolved before any step is offered, so a
conflicting flag or an invalid distribution choice ends the run with
zero side effects.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from devsetup.adapters.registry import AdapterRegistry, default_registry
from devsetup.core.engine.executor import Console, ProvisionReport, run_steps
from devsetup.core.models.platform import PlatformProfile
from devsetup.core.models.settings import ProvisionSettings
from devsetup.core.services.platform_select import (
    detect_platform,
    menu_lines,
    platform_from_choice,
)
from devsetup.core.services.privilege import REDUCED_WARNING, detect_privilege
from devsetup.core.services.shell_config import current_user, home_of
from devsetup.core.services.steps import STEP_TABLE, InstallationStep, ProvisionContext

logger = logging.getLogger(__name__)


class ProvisionConsole(Console, Protocol):
    def choose(self, title: str, options: list[str]) -> str:
        ...

    def warn(self, message: str) -> None:
        ...


def resolve_platform(distro: str | None, console: ProvisionConsole) -> PlatformProfile:
    """``--distro`` value, ``auto`` detection, or the interactive menu.

    Raises:
        SelectionError: Unknown value or undetectable distribution.
    """
    if distro == "auto":
        return detect_platform()
    if distro:
        return platform_from_choice(distro)
    choice = console.choose("Select your Linux distribution:", menu_lines())
    return platform_from_choice(choice)


def run_provision(
    *,
    console: ProvisionConsole,
    settings: ProvisionSettings | None = None,
    no_sudo: bool = False,
    distro: str | None = None,
    assume_yes: bool = False,
    dry_run: bool = False,
    registry: AdapterRegistry | None = None,
    home: str | None = None,
    user: str | None = None,
    steps: Sequence[InstallationStep] = STEP_TABLE,
) -> ProvisionReport:
    """Provision the workstation.

    Single instance assumed: no lock guards the rc file or the build
    directory against a concurrent run.

    Raises:
        PrivilegeError: Conflicting or unobtainable privileges.
        SelectionError: Invalid distribution.
        ConfirmationError: No valid yes/no answer.
        StepFailedError: A step failed; the rest of the run was aborted.
    """
    settings = settings or ProvisionSettings()

    privilege = detect_privilege(no_sudo)
    if privilege.reduced:
        console.warn(REDUCED_WARNING)

    platform = resolve_platform(distro, console)
    console.notice(f"Setting up development environment for {platform.id.value}")
    if dry_run:
        console.warn("Dry run: nothing will be executed.")

    user = user or current_user()
    ctx = ProvisionContext(
        platform=platform,
        privilege=privilege,
        settings=settings,
        home=home or home_of(user),
        user=user,
        dry_run=dry_run,
    )
    logger.info("Provisioning %s for %s (home=%s)", platform.id.value, ctx.user, ctx.home)

    report = run_steps(
        ctx,
        steps,
        registry or default_registry(),
        console,
        assume_yes=assume_yes,
    )
    logger.info(
        "Steps run: %s (%d actions)", ", ".join(report.ran_steps) or "none", len(report.receipts)
    )

    console.banner("Setup complete!")
    console.notice(
        f"Please restart your terminal or run 'source ~/{settings.shell_rc}' to apply the changes."
    )
    return report
