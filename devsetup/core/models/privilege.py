"""
Privilege mode — how privileged commands are launched for this run.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PrivilegeMode(BaseModel):
    """Resolved once at startup, immutable afterwards.

    ``wrapper`` is prepended to every privileged command: ``("sudo",)``
    for an unprivileged user, empty when already root or when the user
    asked to run without sudo (``reduced``).
    """

    model_config = ConfigDict(frozen=True)

    elevated: bool
    wrapper: tuple[str, ...] = ()
    reduced: bool = False

    def wrap(self, argv: list[str]) -> list[str]:
        return [*self.wrapper, *argv]
