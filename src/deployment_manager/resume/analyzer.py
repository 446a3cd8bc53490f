"""History analyzer: rebuild a resume point from an execution's event log.

The log is read newest-first in a single pass. Each capture arms on one
event and fires on the next event of the matching shape; once fired it never
re-arms, so only the most recent failure of a retry loop is resumed.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Iterable

from deployment_manager.core.exceptions import MalformedInputError
from deployment_manager.core.logging import get_logger
from deployment_manager.core.types import JsonDict
from deployment_manager.models.decision import RESUME_TO, Continuation
from deployment_manager.models.execution import HistoryEvent, HistoryEventType

logger = get_logger(__name__)


class ScanState(Enum):
    IDLE = "idle"
    ARMED_FOR_EXIT = "armed_for_exit"
    ARMED_FOR_ENTRY = "armed_for_entry"
    CAPTURED = "captured"


def parse_payload(raw: str | None) -> JsonDict:
    """Parse a state input into a dict. Raises MalformedInputError."""
    if raw is None or raw == "":
        return {}
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(f"State input is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedInputError(
            f"State input must be a JSON object, got {type(payload).__name__}"
        )
    return payload


def analyze(events: Iterable[HistoryEvent], target_state: str | None = None) -> Continuation:
    """Reduce a newest-first event log to a Continuation.

    Args:
        events: History events, most recent first.
        target_state: Resume into this state instead of the failed one. Its
            most recent entry in the log supplies the input.
    """
    success = ScanState.IDLE
    failure = ScanState.IDLE
    completed_before_failure = ScanState.IDLE
    target = ScanState.IDLE

    failed_state = ""
    succeeded_state = ""
    failed_input: str | None = None
    target_input: str | None = None

    for event in events:
        if event.kind is HistoryEventType.EXECUTION_SUCCEEDED:
            if success is ScanState.IDLE:
                success = ScanState.ARMED_FOR_EXIT
            continue

        if success is ScanState.ARMED_FOR_EXIT and event.is_state_exited:
            succeeded_state = event.state_name
            success = ScanState.CAPTURED

        # The last state to complete before the failing one was entered
        if (
            completed_before_failure is ScanState.ARMED_FOR_EXIT
            and event.is_state_exited
            and success is not ScanState.CAPTURED
        ):
            succeeded_state = event.state_name
            completed_before_failure = ScanState.CAPTURED

        if failure is ScanState.ARMED_FOR_ENTRY and event.is_state_entered:
            failed_state = event.state_name
            failed_input = event.input
            failure = ScanState.CAPTURED
            completed_before_failure = ScanState.ARMED_FOR_EXIT

        if failure is ScanState.IDLE and event.is_failure:
            failure = ScanState.ARMED_FOR_ENTRY

        if (
            target_state
            and target is ScanState.IDLE
            and event.is_state_entered
            and event.state_name == target_state
        ):
            target_input = event.input
            target = ScanState.CAPTURED

    resume_to = target_state or failed_state or ""
    raw_input = target_input if target_input is not None else failed_input
    try:
        resume_input = parse_payload(raw_input)
    except MalformedInputError as exc:
        logger.warning("resume_input_malformed", resume_to=resume_to, error=str(exc))
        resume_input = {}
    resume_input[RESUME_TO] = resume_to

    return Continuation(
        failed_state=failed_state,
        succeeded_state=succeeded_state,
        resume_input=resume_input,
    )
