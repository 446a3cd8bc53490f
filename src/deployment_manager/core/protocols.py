"""Protocol interfaces for the deployment manager's collaborators.

The workflow engine is reached only through these Protocols. Structural
typing, no inheritance required, easy to swap for a fake in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from deployment_manager.core.types import ExecutionArn, JsonDict, StateMachineArn

if TYPE_CHECKING:
    from deployment_manager.models.execution import (
        ExecutionHandle,
        ExecutionSummary,
        HistoryEvent,
    )


# ---------------------------------------------------------------------------
# Workflow Engine
# ---------------------------------------------------------------------------

@runtime_checkable
class IWorkflowEngine(Protocol):
    """Abstraction over the engine that runs state machine executions."""

    def list_executions(self, workflow_id: StateMachineArn, limit: int = 1) -> list[ExecutionSummary]: ...

    def get_execution_history(
        self, execution_arn: ExecutionArn, max_events: int = 1000, reverse_order: bool = True
    ) -> list[HistoryEvent]: ...

    def start_execution(
        self, workflow_id: StateMachineArn, name: str, input_payload: JsonDict
    ) -> ExecutionHandle: ...

