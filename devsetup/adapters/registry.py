"""
Adapter registry — resolves ``Action.adapter`` to an Adapter and runs it.

Every Action of every step passes through ``execute_action``, which is
where dry runs and mock runs are honoured. It always returns a Receipt:
a missing adapter, rejected params or an exception escaping an adapter
all come back as ``status="failed"``.
"""

from __future__ import annotations

import logging
import time

from devsetup.adapters.base import Adapter, ExecutionContext
from devsetup.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Adapters by name.

    ``mock_mode`` answers every action with success without consulting
    any adapter (``devsetup --mock``).
    """

    def __init__(self, mock_mode: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self.mock_mode = mock_mode

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter %s", adapter.name)
        self._adapters[adapter.name] = adapter

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def execute_action(self, action: Action, home: str = "~", dry_run: bool = False) -> Receipt:
        """Validate and run one action; never raises ``Exception``.

        ``KeyboardInterrupt`` is not caught, so the engine's cleanup
        ``finally`` sees it.
        """
        if self.mock_mode:
            return Receipt.success(
                adapter=action.adapter,
                action_id=action.id,
                output=f"[mock] {action.describe()}",
                metadata={"mock": True},
            )

        adapter = self.get(action.adapter)
        if adapter is None:
            return _rejected(action, f"No adapter registered for '{action.adapter}'")

        context = ExecutionContext(action=action, home=home, dry_run=dry_run)
        try:
            valid, reason = adapter.validate(context)
        except Exception as e:
            return _rejected(action, f"Validation error: {e}")
        if not valid:
            return _rejected(action, f"Validation failed: {reason}")

        if dry_run:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] Would execute {action.describe()}",
                metadata={"dry_run": True},
            )

        started = time.monotonic()
        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised on %s: %s", adapter.name, action.id, e)
            receipt = _rejected(action, f"Unexpected error: {e}")
        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        return receipt


def _rejected(action: Action, error: str) -> Receipt:
    return Receipt.failure(adapter=action.adapter, action_id=action.id, error=error)


def default_registry(mock_mode: bool = False) -> AdapterRegistry:
    """Registry wired with the real collaborators."""
    from devsetup.adapters.net.network import NetworkAdapter
    from devsetup.adapters.shell.command import ShellCommandAdapter
    from devsetup.adapters.shell.filesystem import FilesystemAdapter
    from devsetup.adapters.vcs.git import GitAdapter

    registry = AdapterRegistry(mock_mode=mock_mode)
    for adapter in (ShellCommandAdapter(), FilesystemAdapter(), GitAdapter(), NetworkAdapter()):
        registry.register(adapter)
    return registry
