"""Continuation, decision result, and lifecycle request models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from deployment_manager.resume.attributes import (
    ATTR_CURRENT_STATUS,
    ATTR_LAST_EXECUTION_ARN,
    ATTR_LAST_EXECUTION_START_TIME,
    ATTR_TASK_STATES,
)

RESUME_TO = "resumeTo"


class RequestKind(StrEnum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class DecisionStatus(StrEnum):
    EXECUTION_STARTED = "EXECUTION_STARTED"
    EXECUTION_LIST_ERROR = "EXECUTION_LIST_ERROR"
    EXECUTION_HISTORY_ERROR = "EXECUTION_HISTORY_ERROR"
    EXECUTION_START_FAILED = "EXECUTION_START_FAILED"


class Continuation(BaseModel):
    """Resume point reconstructed from an execution's history.

    ``resume_input`` always carries a ``resumeTo`` key naming the state the
    dispatcher should jump into.
    """

    model_config = ConfigDict(populate_by_name=True)

    failed_state: str = Field(default="", alias="failedState")
    succeeded_state: str = Field(default="", alias="succeededState")
    resume_input: dict[str, Any] = Field(
        default_factory=lambda: {RESUME_TO: ""}, alias="resumeInput"
    )

    @property
    def resume_to(self) -> str:
        return self.resume_input.get(RESUME_TO, "")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class DecisionResult(BaseModel):
    """What the decision engine reports back to the provisioning layer."""

    current_status: str = ""
    last_execution_arn: str = ""
    last_execution_start_time: str = ""
    task_states: str = ""
    started: bool = False

    def to_attributes(self) -> dict[str, str]:
        return {
            ATTR_LAST_EXECUTION_START_TIME: self.last_execution_start_time,
            ATTR_CURRENT_STATUS: self.current_status,
            ATTR_TASK_STATES: self.task_states,
            ATTR_LAST_EXECUTION_ARN: self.last_execution_arn,
        }


class LifecycleRequest(BaseModel):
    """A parsed CloudFormation custom resource event."""

    request_kind: RequestKind
    request_id: str
    workflow_id: str = ""
    scheduled_start_time: Optional[datetime] = None
    manual_input: Optional[Union[str, dict[str, Any]]] = None
    last_cfn_update: Optional[str] = None
    physical_resource_id: Optional[str] = None
