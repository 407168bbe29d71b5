from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from webstep.browser.actions import ActionRecord
from webstep.runner.context import RunContext
from webstep.runner.dispatch import ActionDispatcher

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunReport:
    total_steps: int
    steps_executed: int = 0
    success: bool = False
    failed_index: int | None = None
    failed_action: str | None = None
    error: BaseException | None = None
    history: list[dict[str, Any]] = field(default_factory=list)

    def push(self, event: dict[str, Any]) -> None:
        self.history.append(event)

    @property
    def last_error(self) -> str | None:
        if self.error is None:
            return None
        return f"Error executing step {self.failed_index} ({self.failed_action}): {self.error}"


class StepRunner:
    """Executes records in order against one RunContext, stopping at the first failure."""

    def __init__(
        self,
        dispatcher: ActionDispatcher | None = None,
        progress: Callable[[str], None] = print,
    ) -> None:
        self.dispatcher = dispatcher or ActionDispatcher()
        self.progress = progress

    async def run(self, ctx: RunContext, records: Sequence[ActionRecord]) -> RunReport:
        report = RunReport(total_steps=len(records))

        for step_no, record in enumerate(records, start=1):
            self.progress(f"Step {step_no}/{report.total_steps}: {record.action}")
            try:
                await self.dispatcher.dispatch(ctx, record)
            except Exception as exc:
                report.failed_index = step_no
                report.failed_action = record.action
                report.error = exc
                report.push({"step": step_no, "action": record.action, "success": False, "error": str(exc)})
                logger.debug("Step %d (%s) failed", step_no, record.action, exc_info=exc)
                return report

            report.steps_executed = step_no
            report.push({"step": step_no, "action": record.action, "success": True})

        report.success = True
        return report
