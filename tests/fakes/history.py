"""Builders for Step Functions history events, shaped like boto3 responses."""

from __future__ import annotations

import json
from typing import Any

from deployment_manager.models.execution import HistoryEvent


def event(type_: str, **details: Any) -> HistoryEvent:
    return HistoryEvent.from_sfn({"type": type_, **details})


def entered(name: str, payload: Any = None, type_: str = "TaskStateEntered") -> HistoryEvent:
    raw_input = payload if isinstance(payload, str) else json.dumps(payload or {})
    return event(type_, stateEnteredEventDetails={"name": name, "input": raw_input})


def exited(name: str, output: Any = None, type_: str = "TaskStateExited") -> HistoryEvent:
    return event(type_, stateExitedEventDetails={"name": name, "output": json.dumps(output or {})})
