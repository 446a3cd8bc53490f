"""Step Functions backend implementing IWorkflowEngine."""

from __future__ import annotations

import json
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from deployment_manager.core.exceptions import HistoryError, ListError, StartError
from deployment_manager.models.execution import (
    ExecutionHandle,
    ExecutionSummary,
    HistoryEvent,
)


class StepFunctionsWorkflowEngine:
    """Production IWorkflowEngine backed by AWS Step Functions."""

    def __init__(self, region: str = "us-east-1", endpoint_url: str | None = None) -> None:
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("stepfunctions", **kwargs)

    def list_executions(self, workflow_id: str, limit: int = 1) -> list[ExecutionSummary]:
        try:
            resp = self._client.list_executions(stateMachineArn=workflow_id, maxResults=limit)
        except (ClientError, BotoCoreError) as exc:
            raise ListError(workflow_id, str(exc)) from exc
        try:
            executions = [ExecutionSummary.from_sfn(item) for item in resp.get("executions", [])]
        except ValidationError as exc:
            raise ListError(workflow_id, f"unrecognised execution summary: {exc}") from exc
        return sorted(executions, key=lambda e: e.start_date, reverse=True)

    def get_execution_history(
        self, execution_arn: str, max_events: int = 1000, reverse_order: bool = True
    ) -> list[HistoryEvent]:
        try:
            resp = self._client.get_execution_history(
                executionArn=execution_arn,
                maxResults=max_events,
                reverseOrder=reverse_order,
            )
        except (ClientError, BotoCoreError) as exc:
            raise HistoryError(execution_arn, str(exc)) from exc
        return [HistoryEvent.from_sfn(raw) for raw in resp.get("events", [])]

    def start_execution(
        self, workflow_id: str, name: str, input_payload: dict[str, Any]
    ) -> ExecutionHandle:
        try:
            resp = self._client.start_execution(
                stateMachineArn=workflow_id,
                name=name,
                input=json.dumps(input_payload),
            )
        except (ClientError, BotoCoreError) as exc:
            raise StartError(workflow_id, str(exc)) from exc
        return ExecutionHandle(execution_arn=resp["executionArn"], start_date=resp["startDate"])
