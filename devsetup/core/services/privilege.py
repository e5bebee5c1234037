"""
Privilege resolution — decide once how privileged commands are launched.

Policy:
    root + --no-sudo        → PrivilegeConflictError
    root                    → no wrapper
    non-root + --no-sudo    → no wrapper, reduced capability (warned)
    non-root                → ``sudo`` wrapper; PrivilegeError if sudo is missing
"""

from __future__ import annotations

import logging
import os
import shutil

from devsetup.core.errors import PrivilegeConflictError, PrivilegeError
from devsetup.core.models.privilege import PrivilegeMode

logger = logging.getLogger(__name__)

SUDO = "sudo"

REDUCED_WARNING = "Running without sudo. Some features may not work."


def resolve_privilege(
    euid_is_zero: bool,
    no_sudo: bool,
    sudo_available: bool = True,
) -> PrivilegeMode:
    """Pure privilege decision.

    Raises:
        PrivilegeConflictError: Running as root with ``--no-sudo``.
        PrivilegeError: Not root, sudo requested implicitly, but missing.
    """
    if euid_is_zero:
        if no_sudo:
            raise PrivilegeConflictError(
                "Running as root, but --no-sudo was specified. "
                "Run without sudo or drop the --no-sudo flag."
            )
        return PrivilegeMode(elevated=True)

    if no_sudo:
        return PrivilegeMode(elevated=False, reduced=True)

    if not sudo_available:
        raise PrivilegeError(
            "Not running as root and 'sudo' was not found on PATH. "
            "Run as root, install sudo, or pass --no-sudo."
        )
    return PrivilegeMode(elevated=False, wrapper=(SUDO,))


def detect_privilege(no_sudo: bool) -> PrivilegeMode:
    """Resolve the privilege mode of the current process."""
    euid_is_zero = os.geteuid() == 0
    mode = resolve_privilege(
        euid_is_zero=euid_is_zero,
        no_sudo=no_sudo,
        sudo_available=euid_is_zero or shutil.which(SUDO) is not None,
    )
    logger.info(
        "Privilege mode: elevated=%s wrapper=%s reduced=%s",
        mode.elevated, list(mode.wrapper), mode.reduced,
    )
    return mode
