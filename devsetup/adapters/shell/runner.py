"""
Subprocess runner — the SINGLE PLACE where ``subprocess.run`` is called.

Every external command the provisioner launches (package manager,
chsh, tar, make, git, installer scripts) goes through ``run_command``
so logging and failure reporting look the same everywhere.

Output is streamed to the terminal by default: package managers and
compilers are long-running and the operator learns about failures from
their own output. Capture is used for short queries.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.returncode == 0


def format_argv(argv: list[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_command(
    argv: list[str],
    *,
    cwd: str | None = None,
    env_overrides: dict[str, str] | None = None,
    capture: bool = False,
    timeout: int | None = None,
) -> CommandResult:
    """Run one command and report how it went.

    Args:
        argv: Command list for ``subprocess.run()``; never a shell string.
        cwd: Working directory.
        env_overrides: Extra environment variables, ``$VAR`` expanded.
        capture: Capture stdout/stderr instead of inheriting the terminal.
        timeout: Seconds before ``TimeoutExpired``; None waits forever.

    Returns:
        CommandResult. Launch errors (missing binary, timeout) are
        reported through ``error`` rather than raised.
    """
    logger.info("CMD %s%s", format_argv(argv), f" (cwd={cwd})" if cwd else "")

    env = None
    if env_overrides:
        env = os.environ.copy()
        for key, value in env_overrides.items():
            env[key] = os.path.expandvars(value)

    start = time.monotonic()
    try:
        result = subprocess.run(
            argv,
            capture_output=capture,
            text=True,
            timeout=timeout,
            env=env,
            cwd=cwd,
        )
    except FileNotFoundError:
        return CommandResult(argv=argv, returncode=127, error=f"Command not found: {argv[0]}")
    except subprocess.TimeoutExpired:
        return CommandResult(argv=argv, returncode=-1, error=f"Command timed out ({timeout}s)")
    except OSError as e:
        logger.exception("Subprocess error: %s", argv)
        return CommandResult(argv=argv, returncode=-1, error=str(e))

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = result.stdout or ""
    stderr = result.stderr or ""
    if stdout:
        logger.debug("STDOUT %s", stdout.strip()[-2000:])
    if stderr:
        logger.debug("STDERR %s", stderr.strip()[-2000:])

    return CommandResult(
        argv=argv,
        returncode=result.returncode,
        stdout=stdout,
        stderr=stderr,
        elapsed_ms=elapsed_ms,
    )
