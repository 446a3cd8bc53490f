"""In-memory workflow engine for unit tests, a dict-backed fake."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

from deployment_manager.core.exceptions import HistoryError, ListError, StartError
from deployment_manager.models.execution import (
    ExecutionHandle,
    ExecutionStatus,
    ExecutionSummary,
    HistoryEvent,
)


class MemoryWorkflowEngine:
    """Dict-backed IWorkflowEngine for unit tests.

    Records every call so tests can assert on what the decision engine did.
    Set ``fail_list``, ``fail_history`` or ``fail_start`` to simulate API
    errors.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._executions: dict[str, list[ExecutionSummary]] = {}
        self._histories: dict[str, list[HistoryEvent]] = {}
        self.started: list[dict[str, Any]] = []
        self.calls: list[str] = []
        self.fail_list = False
        self.fail_history = False
        self.fail_start = False

    def add_execution(
        self,
        workflow_id: str,
        status: ExecutionStatus | str,
        history: list[HistoryEvent] | None = None,
        start_date: datetime | None = None,
        name: str | None = None,
    ) -> ExecutionSummary:
        """Register an execution; ``history`` is given newest first."""
        runs = self._executions.setdefault(workflow_id, [])
        name = name or f"run-{len(runs) + 1}"
        summary = ExecutionSummary(
            execution_arn=f"{workflow_id.replace(':stateMachine:', ':execution:')}:{name}",
            name=name,
            status=status,
            start_date=start_date or self._clock(),
        )
        runs.append(summary)
        self._histories[summary.execution_arn] = list(history or [])
        return summary

    def list_executions(self, workflow_id: str, limit: int = 1) -> list[ExecutionSummary]:
        self.calls.append("list_executions")
        if self.fail_list:
            raise ListError(workflow_id, "simulated ListExecutions failure")
        runs = sorted(self._executions.get(workflow_id, []), key=lambda e: e.start_date, reverse=True)
        return runs[:limit]

    def get_execution_history(
        self, execution_arn: str, max_events: int = 1000, reverse_order: bool = True
    ) -> list[HistoryEvent]:
        self.calls.append("get_execution_history")
        if self.fail_history:
            raise HistoryError(execution_arn, "simulated GetExecutionHistory failure")
        events = self._histories.get(execution_arn, [])
        if not reverse_order:
            events = list(reversed(events))
        return events[:max_events]

    def start_execution(
        self, workflow_id: str, name: str, input_payload: dict[str, Any]
    ) -> ExecutionHandle:
        self.calls.append("start_execution")
        if self.fail_start:
            raise StartError(workflow_id, "simulated StartExecution failure")
        self.started.append({"workflow_id": workflow_id, "name": name, "input": input_payload})
        summary = self.add_execution(workflow_id, ExecutionStatus.RUNNING, name=name)
        return ExecutionHandle(execution_arn=summary.execution_arn, start_date=summary.start_date)
