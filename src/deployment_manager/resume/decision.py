"""Resume decision engine: start fresh, resume from failure, or leave alone.

Invoked on every Create/Update of the owning custom resource. Each call is a
short sequential unit of work: list the last execution, fetch its history,
derive a Continuation, then start at most one new execution. Engine errors
never escape ``decide``; they become status tags on the DecisionResult with
the previously known attributes preserved.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable

from deployment_manager.core.config import StepFunctionsConfig
from deployment_manager.core.exceptions import (
    HistoryError,
    ListError,
    ManualInputParseError,
    StartError,
)
from deployment_manager.core.logging import get_logger
from deployment_manager.core.protocols import IWorkflowEngine
from deployment_manager.core.types import JsonDict
from deployment_manager.models.decision import (
    RESUME_TO,
    Continuation,
    DecisionResult,
    DecisionStatus,
    RequestKind,
)
from deployment_manager.models.execution import ExecutionSummary
from deployment_manager.resume.analyzer import analyze

MAX_EXECUTION_NAME_LENGTH = 80


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _format_time(value: datetime | None) -> str:
    return value.isoformat() if value else ""


def parse_manual_input(raw: str | JsonDict | None) -> JsonDict | None:
    """Parse caller-supplied execution input. Raises ManualInputParseError."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, dict):
        return dict(raw)
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ManualInputParseError(f"Execution input is not valid JSON: {exc}") from exc
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise ManualInputParseError(
            f"Execution input must be a JSON object, got {type(payload).__name__}"
        )
    return payload


def with_resume_to(payload: JsonDict | None) -> JsonDict:
    """Return a copy of ``payload`` guaranteed to carry ``resumeTo``."""
    out = dict(payload or {})
    out.setdefault(RESUME_TO, "")
    return out


class ResumeDecisionEngine:
    """Decides which execution, if any, to start for a lifecycle event."""

    def __init__(
        self,
        engine: IWorkflowEngine,
        settings: StepFunctionsConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._engine = engine
        self._settings = settings or StepFunctionsConfig()
        self._clock = clock
        self._log = get_logger(__name__)

    def decide(
        self,
        request_kind: RequestKind | str,
        workflow_id: str,
        request_id: str,
        scheduled_start_time: datetime | None = None,
        manual_input: str | JsonDict | None = None,
    ) -> DecisionResult:
        request_kind = RequestKind(request_kind)
        now = self._clock()
        if scheduled_start_time is not None and scheduled_start_time.tzinfo is None:
            scheduled_start_time = scheduled_start_time.replace(tzinfo=timezone.utc)
        log = self._log.bind(workflow_id=workflow_id, request_kind=str(request_kind))

        try:
            manual = parse_manual_input(manual_input)
        except ManualInputParseError as exc:
            log.warning("manual_input_discarded", error=str(exc))
            manual = None

        # ---- last execution ----
        try:
            executions = self._engine.list_executions(workflow_id, limit=1)
        except ListError:
            log.exception("execution_list_failed")
            return DecisionResult(current_status=DecisionStatus.EXECUTION_LIST_ERROR)
        last = executions[0] if executions else None
        previous = self._previous_result(last, None)

        # ---- last execution history ----
        continuation: Continuation | None = None
        if last is not None:
            try:
                history = self._engine.get_execution_history(
                    last.execution_arn,
                    max_events=self._settings.max_history_events,
                    reverse_order=True,
                )
            except HistoryError:
                log.exception("execution_history_failed", execution_arn=last.execution_arn)
                return previous.model_copy(
                    update={"current_status": DecisionStatus.EXECUTION_HISTORY_ERROR}
                )
            continuation = analyze(history)
            if manual is not None:
                continuation.resume_input = with_resume_to(manual)
            previous = self._previous_result(last, continuation)

        log.info(
            "decision_inputs",
            has_manual_input=manual is not None,
            last_execution_arn=last.execution_arn if last else None,
            last_status=str(last.status) if last else None,
            continuation=continuation.to_json() if continuation else None,
        )

        # ---- policy ----
        if request_kind is RequestKind.CREATE:
            if scheduled_start_time is None or now >= scheduled_start_time:
                return self._start(workflow_id, request_id, manual, now, previous, log)
            log.info("first_run_not_due", scheduled_start_time=_format_time(scheduled_start_time))
            return previous

        if manual is not None:
            return self._start(workflow_id, request_id, manual, now, previous, log)

        if last is None:
            return self._start(workflow_id, request_id, None, now, previous, log)

        if last.is_terminal_failure and continuation is not None:
            log.info(
                "resuming_from_failure",
                failed_state=continuation.failed_state,
                resume_to=continuation.resume_to,
            )
            return self._start(
                workflow_id, request_id, continuation.resume_input, now, previous, log
            )

        log.info("execution_left_alone", last_status=str(last.status))
        return previous

    # ---- helpers ----

    @staticmethod
    def _previous_result(
        last: ExecutionSummary | None, continuation: Continuation | None
    ) -> DecisionResult:
        """Best previously known attributes; the fallback for every field."""
        if last is None:
            return DecisionResult()
        return DecisionResult(
            current_status=str(last.status),
            last_execution_arn=last.execution_arn,
            last_execution_start_time=_format_time(last.start_date),
            task_states=continuation.to_json() if continuation else "",
        )

    def _execution_name(self, request_id: str, now: datetime) -> str:
        millis = int(now.timestamp() * 1000)
        name = f"{self._settings.execution_name_prefix}-{request_id}-{millis}"
        return name[:MAX_EXECUTION_NAME_LENGTH]

    def _start(
        self,
        workflow_id: str,
        request_id: str,
        payload: JsonDict | None,
        now: datetime,
        previous: DecisionResult,
        log: Any,
    ) -> DecisionResult:
        input_payload = with_resume_to(payload)
        name = self._execution_name(request_id, now)
        try:
            handle = self._engine.start_execution(workflow_id, name, input_payload)
        except StartError:
            log.exception("execution_start_failed", execution_name=name)
            return previous.model_copy(
                update={"current_status": DecisionStatus.EXECUTION_START_FAILED}
            )

        log.info(
            "execution_started",
            execution_arn=handle.execution_arn,
            resume_to=input_payload[RESUME_TO],
        )
        return previous.model_copy(
            update={
                "current_status": DecisionStatus.EXECUTION_STARTED,
                "last_execution_arn": handle.execution_arn,
                "last_execution_start_time": _format_time(handle.start_date),
                "started": True,
            }
        )
