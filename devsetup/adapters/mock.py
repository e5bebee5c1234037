"""
Mock adapter — stands in for a collaborator in tests.

Register one per adapter name ("shell", "filesystem", "git", "network")
to run whole step plans without spawning a process or touching a file.
"""

from __future__ import annotations

from devsetup.adapters.base import Adapter, ExecutionContext
from devsetup.core.models.action import Receipt


class MockAdapter(Adapter):
    """Succeeds unless scripted otherwise; remembers every call.

    A scripted outcome is either a Receipt, returned as-is, or an
    exception instance, raised from ``execute`` (``KeyboardInterrupt``
    simulates Ctrl+C in the middle of a step).
    """

    def __init__(self, adapter_name: str = "mock", available: bool = True):
        self._name = adapter_name
        self._available = available
        self._scripted: dict[str, Receipt | BaseException] = {}
        self.call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        return len(self.call_log)

    @property
    def action_ids(self) -> list[str]:
        return [ctx.action.id for ctx in self.call_log]

    def is_available(self) -> bool:
        return self._available

    def script(self, action_id: str, outcome: Receipt | BaseException) -> None:
        self._scripted[action_id] = outcome

    def fail(self, action_id: str, error: str = "Mock failure") -> None:
        self.script(action_id, Receipt.failure(adapter=self._name, action_id=action_id, error=error))

    def interrupt(self, action_id: str) -> None:
        self.script(action_id, KeyboardInterrupt())

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self.call_log.append(context)
        outcome = self._scripted.get(context.action.id)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is not None:
            return outcome
        return Receipt.success(
            adapter=self._name,
            action_id=context.action.id,
            output=f"[mock] {context.action.describe()}",
            metadata={"mock": True},
        )

    def reset(self) -> None:
        self.call_log.clear()
        self._scripted.clear()
