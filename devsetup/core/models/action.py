"""
Action and Receipt models — what a step asks for and what it got.

A step builder plans Actions; the registry hands each one to the adapter
named in ``Action.adapter`` (shell, filesystem, git, network) and gets a
Receipt back. Adapters put failures in the Receipt instead of raising,
and the engine alone decides that a failed Receipt ends the run.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

ReceiptStatus = Literal["ok", "skipped", "failed"]


class Action(BaseModel):
    """One side effect of an installation step.

    ``id`` reads ``"<step>:<verb>"`` and is unique inside its step, so a
    cleanup list can name the action whose success arms it.
    """

    id: str
    adapter: str
    step: str = ""
    name: str = ""                  # shown in logs, e.g. "dnf install -y curl git"
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def verb(self) -> str:
        return self.id.rpartition(":")[2]

    def describe(self) -> str:
        return self.name or f"{self.adapter}:{self.id}"


class Receipt(BaseModel):
    """Outcome of one Action.

    ``skipped`` covers dry runs and post-conditions that already held
    (a checkout that exists, a PATH line already in the rc file).
    """

    adapter: str
    action_id: str
    status: ReceiptStatus = "ok"
    output: str = ""
    error: str | None = None
    finished_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    duration_ms: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **extra: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, output=output, **extra)

    @classmethod
    def skip(cls, adapter: str, action_id: str, reason: str = "", **extra: Any) -> Receipt:
        """The action had nothing to do; ``reason`` becomes the output."""
        return cls(adapter=adapter, action_id=action_id, status="skipped", output=reason, **extra)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **extra: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **extra)
