"""
Filesystem adapter — directory, file and rc-line operations.

Relative paths are resolved against the user's home directory.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from devsetup.adapters.base import Adapter, ExecutionContext
from devsetup.core.models.action import Receipt

logger = logging.getLogger(__name__)

# operation -> param it needs besides "path"
_EXTRA_PARAM: dict[str, str | None] = {
    "mkdir": None,
    "write": "content",
    "ensure_line": "line",
    "remove": None,
}


class FilesystemAdapter(Adapter):
    """Creates, writes, appends to and removes paths.

    Params: ``operation`` (mkdir | write | ensure_line | remove), ``path``,
    plus ``content`` for write and ``line`` for ensure_line.
    """

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.params
        operation = params.get("operation")
        if operation not in _EXTRA_PARAM:
            return False, f"Unknown operation {operation!r}; expected one of {', '.join(_EXTRA_PARAM)}"
        if not params.get("path"):
            return False, f"{operation} needs a 'path'"
        extra = _EXTRA_PARAM[operation]
        if extra and params.get(extra) is None:
            return False, f"{operation} needs a '{extra}'"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.params["operation"]
        target = Path(context.resolve_path(context.params["path"]))
        handler = getattr(self, f"_op_{operation}")
        try:
            return handler(context, target)
        except OSError as e:
            return Receipt.failure(
                self.name,
                context.action.id,
                error=f"Filesystem error: {e}",
                metadata={"operation": operation, "path": str(target)},
            )

    def _done(self, ctx: ExecutionContext, target: Path, output: str, **extra) -> Receipt:
        return Receipt.success(self.name, ctx.action.id, output=output, metadata={"path": str(target), **extra})

    def _unchanged(self, ctx: ExecutionContext, target: Path, reason: str) -> Receipt:
        return Receipt.skip(self.name, ctx.action.id, reason=reason, metadata={"path": str(target)})

    def _op_mkdir(self, ctx: ExecutionContext, target: Path) -> Receipt:
        created = not target.is_dir()
        target.mkdir(parents=True, exist_ok=True)
        verb = "created" if created else "exists"
        return self._done(ctx, target, f"Directory {verb}: {target}", created=created)

    def _op_write(self, ctx: ExecutionContext, target: Path) -> Receipt:
        text = ctx.params["content"]
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        logger.info("Wrote %s", target)
        return self._done(ctx, target, f"Wrote {target} ({len(text)} chars)", size=len(text))

    def _op_ensure_line(self, ctx: ExecutionContext, target: Path) -> Receipt:
        """Append ``line`` unless the file already holds it as a whole line."""
        line = ctx.params["line"].rstrip("\n")
        current = target.read_text(encoding="utf-8") if target.is_file() else ""
        if line in current.splitlines():
            return self._unchanged(ctx, target, f"Line already present in {target}")

        target.parent.mkdir(parents=True, exist_ok=True)
        prefix = "\n" if current and not current.endswith("\n") else ""
        with target.open("a", encoding="utf-8") as fh:
            fh.write(f"{prefix}{line}\n")
        logger.info("Appended to %s: %s", target, line)
        return self._done(ctx, target, f"Appended line to {target}")

    def _op_remove(self, ctx: ExecutionContext, target: Path) -> Receipt:
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        elif target.exists() or target.is_symlink():
            target.unlink()
        else:
            return self._unchanged(ctx, target, f"Nothing to remove at {target}")
        logger.info("Removed %s", target)
        return self._done(ctx, target, f"Removed {target}")
