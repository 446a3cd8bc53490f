"""Execution and execution-history models read from Step Functions."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel


class ExecutionStatus(StrEnum):
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"
    ABORTED = "ABORTED"
    PENDING_REDRIVE = "PENDING_REDRIVE"


TERMINAL_FAILED_STATUSES = frozenset(
    {ExecutionStatus.FAILED, ExecutionStatus.TIMED_OUT, ExecutionStatus.ABORTED}
)


class HistoryEventType(StrEnum):
    STATE_ENTERED = "STATE_ENTERED"
    STATE_EXITED = "STATE_EXITED"
    EXECUTION_SUCCEEDED = "EXECUTION_SUCCEEDED"
    EXECUTION_FAILED = "EXECUTION_FAILED"
    EXECUTION_ABORTED = "EXECUTION_ABORTED"
    EXECUTION_TIMED_OUT = "EXECUTION_TIMED_OUT"
    OTHER = "OTHER"


FAILURE_EVENT_TYPES = frozenset(
    {
        HistoryEventType.EXECUTION_FAILED,
        HistoryEventType.EXECUTION_ABORTED,
        HistoryEventType.EXECUTION_TIMED_OUT,
    }
)


def classify_event_type(raw_type: str, raw: dict[str, Any] | None = None) -> HistoryEventType:
    """Map a raw Step Functions event type onto a HistoryEventType.

    Any ``*Failed``, ``*Aborted`` or ``*TimedOut`` type counts as failure
    class, so ``TaskFailed`` and ``LambdaFunctionTimedOut`` qualify too.
    """
    raw = raw or {}
    if raw_type == "ExecutionSucceeded":
        return HistoryEventType.EXECUTION_SUCCEEDED
    if "Failed" in raw_type:
        return HistoryEventType.EXECUTION_FAILED
    if "Aborted" in raw_type:
        return HistoryEventType.EXECUTION_ABORTED
    if "TimedOut" in raw_type:
        return HistoryEventType.EXECUTION_TIMED_OUT
    if "stateEnteredEventDetails" in raw or raw_type.endswith("StateEntered"):
        return HistoryEventType.STATE_ENTERED
    if "stateExitedEventDetails" in raw or raw_type.endswith("StateExited"):
        return HistoryEventType.STATE_EXITED
    return HistoryEventType.OTHER


class ExecutionSummary(BaseModel):
    """One run of a state machine, as returned by ListExecutions."""

    execution_arn: str
    name: str = ""
    status: ExecutionStatus
    start_date: datetime
    stop_date: Optional[datetime] = None

    @classmethod
    def from_sfn(cls, item: dict[str, Any]) -> ExecutionSummary:
        return cls(
            execution_arn=item["executionArn"],
            name=item.get("name", ""),
            status=item["status"],
            start_date=item["startDate"],
            stop_date=item.get("stopDate"),
        )

    @property
    def is_terminal_failure(self) -> bool:
        return self.status in TERMINAL_FAILED_STATUSES


class ExecutionHandle(BaseModel):
    """Reference to an execution we just started."""

    execution_arn: str
    start_date: datetime


class HistoryEvent(BaseModel):
    """A single record from an execution's event history."""

    id: int = 0
    type: str
    kind: HistoryEventType
    state_name: Optional[str] = None
    input: Optional[str] = None  # state-entered events only
    output: Optional[str] = None  # state-exited events only
    timestamp: Optional[datetime] = None

    @classmethod
    def from_sfn(cls, raw: dict[str, Any]) -> HistoryEvent:
        raw_type = raw.get("type", "")
        entered = raw.get("stateEnteredEventDetails")
        exited = raw.get("stateExitedEventDetails")
        state_name = None
        if entered:
            state_name = entered.get("name")
        elif exited:
            state_name = exited.get("name")
        return cls(
            id=raw.get("id", 0),
            type=raw_type,
            kind=classify_event_type(raw_type, raw),
            state_name=state_name,
            input=entered.get("input") if entered else None,
            output=exited.get("output") if exited else None,
            timestamp=raw.get("timestamp"),
        )

    @property
    def is_state_entered(self) -> bool:
        return self.kind is HistoryEventType.STATE_ENTERED and self.state_name is not None

    @property
    def is_state_exited(self) -> bool:
        return self.kind is HistoryEventType.STATE_EXITED and self.state_name is not None

    @property
    def is_failure(self) -> bool:
        return self.kind in FAILURE_EVENT_TYPES
