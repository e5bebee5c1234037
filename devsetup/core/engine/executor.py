"""
Step engine — the sequential provisioning loop.

For every step of the table, in order:

    dependency satisfied? → confirm → banner → build plan → execute actions → cleanup

Execution stops at the first failed action. The only actions that still
run after a failure are a step's cleanup actions, and only when the
action that arms them succeeded. Nothing runs concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal, Protocol

from devsetup.adapters.registry import AdapterRegistry
from devsetup.core.errors import StepFailedError
from devsetup.core.models.action import Receipt
from devsetup.core.services.steps import InstallationStep, ProvisionContext, StepPlan

logger = logging.getLogger(__name__)

StepStatus = Literal["ok", "skipped", "declined", "not-offered"]


class Console(Protocol):
    """Operator interaction the engine needs."""

    def confirm(self, question: str) -> bool:
        ...

    def banner(self, message: str) -> None:
        ...

    def notice(self, message: str) -> None:
        ...


@dataclass
class StepOutcome:
    step_id: str
    status: StepStatus
    receipts: list[Receipt] = field(default_factory=list)
    detail: str = ""


@dataclass
class ProvisionReport:
    """Outcome of a completed run (a failed run raises instead)."""

    outcomes: list[StepOutcome] = field(default_factory=list)

    def status_of(self, step_id: str) -> StepStatus | None:
        for outcome in self.outcomes:
            if outcome.step_id == step_id:
                return outcome.status
        return None

    @property
    def ran_steps(self) -> list[str]:
        return [o.step_id for o in self.outcomes if o.status == "ok"]

    @property
    def receipts(self) -> list[Receipt]:
        return [r for o in self.outcomes for r in o.receipts]


def execute_plan(
    step_id: str,
    plan: StepPlan,
    registry: AdapterRegistry,
    ctx: ProvisionContext,
) -> list[Receipt]:
    """Run a step's actions, then its armed cleanup.

    Raises:
        StepFailedError: On the first failed action, after cleanup ran.
    """
    receipts: list[Receipt] = []
    succeeded: set[str] = set()
    failure: Receipt | None = None

    try:
        for action in plan.actions:
            receipt = registry.execute_action(action, home=ctx.home, dry_run=ctx.dry_run)
            receipts.append(receipt)
            _log_receipt(receipt)
            if receipt.failed:
                failure = receipt
                break
            if receipt.ok:
                succeeded.add(action.id)
    finally:
        # Also reached on KeyboardInterrupt: never leave the build tree behind
        if plan.cleanup and plan.cleanup_armed_by in succeeded:
            logger.info("Cleaning up after %s", step_id)
            for action in plan.cleanup:
                receipt = registry.execute_action(action, home=ctx.home, dry_run=ctx.dry_run)
                receipts.append(receipt)
                _log_receipt(receipt)
                if receipt.failed:
                    logger.warning("Cleanup action %s failed: %s", action.id, receipt.error)
                    if failure is None:
                        failure = receipt

    if failure is not None:
        raise StepFailedError(step_id, failure)
    return receipts


def run_steps(
    ctx: ProvisionContext,
    steps: Sequence[InstallationStep],
    registry: AdapterRegistry,
    console: Console,
    assume_yes: bool = False,
) -> ProvisionReport:
    """Offer and run each step in order.

    Raises:
        StepFailedError: A step failed; later steps were not offered.
        ConfirmationError: The operator gave no valid answer.
    """
    report = ProvisionReport()

    for step in steps:
        if step.depends_on and report.status_of(step.depends_on) not in ("ok", "skipped"):
            logger.debug("Not offering %s: %s did not run", step.id, step.depends_on)
            report.outcomes.append(StepOutcome(step.id, "not-offered"))
            continue

        if not (assume_yes or console.confirm(step.render_prompt(ctx.settings))):
            logger.info("Step %s declined", step.id)
            report.outcomes.append(StepOutcome(step.id, "declined"))
            continue

        console.banner(step.banner)
        logger.info("Running step %s", step.id)

        plan = step.build(ctx)
        if plan.error:
            raise StepFailedError(
                step.id,
                Receipt.failure(adapter="engine", action_id=f"{step.id}:plan", error=plan.error),
            )
        if plan.skip_reason:
            console.notice(plan.skip_reason)
            report.outcomes.append(StepOutcome(step.id, "skipped", detail=plan.skip_reason))
            continue

        receipts = execute_plan(step.id, plan, registry, ctx)
        report.outcomes.append(StepOutcome(step.id, "ok", receipts=receipts))

    return report


def _log_receipt(receipt: Receipt) -> None:
    status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
    logger.info("%s %s → %s", status_marker, receipt.action_id, receipt.status)
