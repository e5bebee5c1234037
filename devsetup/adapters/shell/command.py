"""
Shell command adapter — run an argv command and capture the outcome.

Package-manager invocations, ``chsh``, ``tar`` and ``make`` all go
through here. The command is already fully built (privilege wrapper
included) when it reaches the adapter.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from devsetup.adapters.base import Adapter, ExecutionContext
from devsetup.adapters.shell.runner import format_argv, run_command
from devsetup.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Execute argv commands.

    Action params:
        argv (list[str]): The command to execute.
        cwd (str): Working directory (default: inherited).
        env (dict[str, str]): Extra environment variables.
        capture (bool): Capture output instead of streaming it (default: False).
        timeout (int): Timeout in seconds (default: none).
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.params.get("argv")
        if not argv or not isinstance(argv, list):
            return False, "Missing required param: 'argv' (non-empty list)"

        # The directory may only appear once earlier actions have run
        cwd = context.params.get("cwd")
        if cwd and not context.dry_run and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.params
        argv = [str(a) for a in params["argv"]]

        result = run_command(
            argv,
            cwd=params.get("cwd"),
            env_overrides=params.get("env"),
            capture=params.get("capture", False),
            timeout=params.get("timeout"),
        )
        command = format_argv(argv)

        if result.ok:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=result.stdout.strip(),
                duration_ms=result.elapsed_ms,
                metadata={"command": command, "return_code": 0},
            )

        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=result.error
            or result.stderr.strip()
            or f"Command exited with code {result.returncode}: {command}",
            duration_ms=result.elapsed_ms,
            metadata={"command": command, "return_code": result.returncode},
        )
