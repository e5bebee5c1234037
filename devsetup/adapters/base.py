"""
Adapter base — how the provisioner reaches outside its own process.

Spawning a package manager, writing ``~/.zshrc``, cloning a repository
and downloading an archive all happen behind an Adapter. The engine only
sees Actions going in and Receipts coming out.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from devsetup.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """One Action plus the run facts an adapter may need."""

    action: Action
    home: str = "~"
    dry_run: bool = False

    @property
    def params(self) -> dict[str, Any]:
        return self.action.params

    def resolve_path(self, raw: str) -> str:
        """Absolute paths pass through; ``~/x`` and ``x`` land under ``home``."""
        if raw.startswith("/"):
            return raw
        return str(Path(self.home) / raw.removeprefix("~/"))


class Adapter(ABC):
    """A collaborator of the provisioner.

    ``execute`` must not raise: a failure is a Receipt with
    ``status="failed"``. ``validate`` runs first, also in dry runs, so a
    malformed plan is caught before anything happens.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, matched against ``Action.adapter``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backing tool is present. Cheap; never raises."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """``(True, "")`` or ``(False, reason)`` for the action's params."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Perform the side effect and describe the outcome."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
