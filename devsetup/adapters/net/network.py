"""
Network adapter — retrieve a URL to a file, or fetch and run an installer.

Downloads land in ``<dest>.part`` and are renamed into place only when
complete, so an interrupted run never leaves a truncated archive that
looks finished. The ``.part`` file is removed on any failure.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import urllib.request
from pathlib import Path

from devsetup import __version__
from devsetup.adapters.base import Adapter, ExecutionContext
from devsetup.adapters.shell.runner import run_command
from devsetup.core.models.action import Receipt

logger = logging.getLogger(__name__)

_USER_AGENT = f"devsetup/{__version__}"
_CHUNK = 64 * 1024


def fetch_to_file(url: str, dest: Path, *, timeout: int = 60) -> int:
    """Stream ``url`` into ``dest`` atomically. Returns bytes written.

    Raises:
        OSError: On network or filesystem errors (URLError is an OSError).
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    partial = dest.with_name(dest.name + ".part")
    req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})

    written = 0
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp, open(partial, "wb") as f:
            for chunk in iter(lambda: resp.read(_CHUNK), b""):
                f.write(chunk)
                written += len(chunk)
        os.replace(partial, dest)
    except BaseException:
        partial.unlink(missing_ok=True)
        raise
    return written


class NetworkAdapter(Adapter):
    """Remote retrieval.

    Action params:
        operation (str): 'download' or 'run_script'.
        url (str): Source URL.
        dest (str): Target file (for 'download').
        args (list[str]): Arguments for the script (for 'run_script').
        env (dict[str, str]): Extra environment for the script.
        timeout (int): Network timeout in seconds (default: 60).
    """

    @property
    def name(self) -> str:
        return "network"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.params
        operation = params.get("operation", "")
        if operation not in {"download", "run_script"}:
            return False, f"Unknown operation '{operation}'. Valid: download, run_script"

        url = params.get("url", "")
        if not url.startswith(("https://", "http://")):
            return False, f"Invalid URL: {url!r}"

        if operation == "download" and not params.get("dest"):
            return False, "Missing required param: 'dest' for download operation"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        if context.params["operation"] == "download":
            return self._download(context)
        return self._run_script(context)

    def _download(self, ctx: ExecutionContext) -> Receipt:
        url = ctx.params["url"]
        dest = Path(ctx.resolve_path(ctx.params["dest"]))
        timeout = ctx.params.get("timeout", 60)

        logger.info("GET %s → %s", url, dest)
        try:
            size = fetch_to_file(url, dest, timeout=timeout)
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Download failed: {e}",
                metadata={"url": url, "dest": str(dest)},
            )

        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Downloaded {size} bytes to {dest}",
            metadata={"url": url, "dest": str(dest), "size_bytes": size},
        )

    def _run_script(self, ctx: ExecutionContext) -> Receipt:
        params = ctx.params
        url = params["url"]
        tmp_dir = Path(tempfile.mkdtemp(prefix="devsetup-"))
        script = tmp_dir / "install.sh"

        try:
            logger.info("GET %s", url)
            try:
                fetch_to_file(url, script, timeout=params.get("timeout", 60))
            except OSError as e:
                return Receipt.failure(
                    adapter=self.name,
                    action_id=ctx.action.id,
                    error=f"Could not fetch installer: {e}",
                    metadata={"url": url},
                )

            result = run_command(
                ["sh", str(script), *params.get("args", [])],
                env_overrides=params.get("env"),
            )
        finally:
            shutil.rmtree(tmp_dir, ignore_errors=True)

        if result.ok:
            return Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                output=f"Ran installer from {url}",
                duration_ms=result.elapsed_ms,
                metadata={"url": url},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=ctx.action.id,
            error=result.error or f"Installer from {url} exited with code {result.returncode}",
            duration_ms=result.elapsed_ms,
            metadata={"url": url, "return_code": result.returncode},
        )
