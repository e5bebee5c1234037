"""
Shell configuration helpers — PATH export lines and login-shell lookup.
"""

from __future__ import annotations

import logging
import os
import pwd
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def path_export_line(path_entry: str, shell_type: str = "zsh") -> str:
    """Shell-specific line that prepends ``path_entry`` to PATH.

    Args:
        path_entry: Directory to add, e.g. ``"$HOME/scripts"``.
        shell_type: ``"zsh"``, ``"bash"``, ``"fish"``...
    """
    if shell_type == "fish":
        return f"set -gx PATH {path_entry} $PATH"
    return f'export PATH="{path_entry}:$PATH"'


def current_user() -> str:
    """Login name of the invoking user (``$SUDO_USER`` wins under sudo)."""
    for var in ("SUDO_USER", "USER", "LOGNAME"):
        value = os.environ.get(var)
        if value:
            return value
    return pwd.getpwuid(os.getuid()).pw_name


def home_of(user: str) -> str:
    """Home directory that belongs with ``user``.

    Under sudo ``$HOME`` usually points at root's home, so the invoking
    account's entry in the password database is used instead.
    """
    if user == os.environ.get("SUDO_USER"):
        try:
            return pwd.getpwnam(user).pw_dir
        except KeyError:
            logger.debug("User %s not in password database, using $HOME", user)
    return str(Path.home())


def login_shell_of(user: str) -> str | None:
    """The user's login shell from the password database, or None."""
    try:
        return pwd.getpwnam(user).pw_shell
    except KeyError:
        logger.debug("User %s not in password database", user)
        return None


def resolve_shell_binary(shell: str) -> str | None:
    """Absolute path of ``shell`` on PATH (``command -v``)."""
    return shutil.which(shell)
