"""
Provisioning errors.

Each kind maps to exit code 1 at the CLI. They are raised before any
step runs (privilege, selection) or abort the step sequence (step
failure, exhausted confirmation attempts).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from devsetup.core.models.action import Receipt


class ProvisionError(Exception):
    """Base class for errors that end a provisioning run."""


class PrivilegeError(ProvisionError):
    """The process cannot obtain the privileges the run needs."""


class PrivilegeConflictError(PrivilegeError):
    """Running as root while --no-sudo was requested."""


class SelectionError(ProvisionError):
    """An invalid distribution choice."""


class ConfirmationError(ProvisionError):
    """No valid yes/no answer within the allowed attempts."""


class StepFailedError(ProvisionError):
    """An action of an installation step failed; the run stops here."""

    def __init__(self, step_id: str, receipt: Receipt):
        self.step_id = step_id
        self.receipt = receipt
        super().__init__(
            f"Step '{step_id}' failed at {receipt.action_id}: {receipt.error}"
        )
