"""
Git adapter — clone repositories and set global identity.

Uses the git CLI through the shared runner.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from devsetup.adapters.base import Adapter, ExecutionContext
from devsetup.adapters.shell.runner import run_command
from devsetup.core.models.action import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(Adapter):
    """Git version control operations.

    Action params:
        operation (str): One of 'clone', 'config_global'.
        url (str): Repository URL (for 'clone').
        dest (str): Destination directory, relative to home (for 'clone').
        key (str): Config key such as ``user.name`` (for 'config_global').
        value (str): Config value (for 'config_global').
    """

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.params
        operation = params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"

        valid_ops = {"clone", "config_global"}
        if operation not in valid_ops:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(valid_ops))}"

        if operation == "clone":
            if not params.get("url") or not params.get("dest"):
                return False, "Missing required params: 'url' and 'dest' for clone operation"
        elif not params.get("key") or "value" not in params:
            return False, "Missing required params: 'key' and 'value' for config_global operation"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        if context.params["operation"] == "clone":
            return self._clone(context)
        return self._config_global(context)

    # ── Operations ──────────────────────────────────────────────

    def _clone(self, ctx: ExecutionContext) -> Receipt:
        url = ctx.params["url"]
        dest = Path(ctx.resolve_path(ctx.params["dest"]))

        if (dest / ".git").exists():
            return Receipt.skip(
                adapter=self.name,
                action_id=ctx.action.id,
                reason=f"{dest} is already a git checkout",
                metadata={"dest": str(dest)},
            )

        dest.parent.mkdir(parents=True, exist_ok=True)
        return self._git(ctx, ["clone", url, str(dest)], capture=False)

    def _config_global(self, ctx: ExecutionContext) -> Receipt:
        key = ctx.params["key"]
        value = str(ctx.params["value"])
        return self._git(ctx, ["config", "--global", key, value], capture=True)

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, ctx: ExecutionContext, args: list[str], *, capture: bool) -> Receipt:
        result = run_command(["git", *args], capture=capture)
        if result.ok:
            return Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                output=result.stdout.strip(),
                duration_ms=result.elapsed_ms,
                metadata={"args": args},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=ctx.action.id,
            error=result.error or result.stderr.strip() or f"git {args[0]} failed",
            duration_ms=result.elapsed_ms,
            metadata={"args": args, "return_code": result.returncode},
        )
