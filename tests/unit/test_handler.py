"""Tests for the custom resource Lambda entry point."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from deployment_manager.core.exceptions import UnsupportedRequestError
from deployment_manager.handler import NEVER, on_event, parse_event, parse_start_time
from deployment_manager.models.decision import RequestKind
from deployment_manager.models.execution import ExecutionStatus
from deployment_manager.resume.decision import ResumeDecisionEngine
from tests.fakes import MemoryWorkflowEngine, entered, event

WORKFLOW = "arn:aws:states:us-east-1:123456789012:stateMachine:DeploymentManager-App"
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _millis(dt: datetime) -> str:
    return str(int(dt.timestamp() * 1000))


def _event(request_type: str, **props) -> dict:
    return {
        "RequestType": request_type,
        "RequestId": "6a1e2c3d-0000-4000-8000-000000000001",
        "ResourceType": "Custom::DeploymentManager",
        "ResourceProperties": {"StateMachine": WORKFLOW, "LastCfnUpdate": "1717243200000", **props},
    }


@pytest.fixture
def sfn():
    return MemoryWorkflowEngine(clock=lambda: NOW)


@pytest.fixture
def manager(sfn):
    return ResumeDecisionEngine(sfn, clock=lambda: NOW)


class TestOnEvent:
    def test_create_starts_first_run(self, manager, sfn):
        resp = on_event(_event("Create", StartTime=_millis(NOW - timedelta(minutes=1))), None, manager)

        assert resp["PhysicalResourceId"] == "6a1e2c3d-0000-4000-8000-000000000001"
        assert resp["Data"]["CurrentStatus"] == "EXECUTION_STARTED"
        assert resp["Data"]["LastExecutionArn"].startswith("arn:aws:states:us-east-1:123456789012:execution:")
        assert sfn.started[0]["input"] == {"resumeTo": ""}
        assert resp["Data"]["ActualStartTime"] == NOW.isoformat()

    def test_update_keeps_physical_id_and_resumes(self, manager, sfn):
        history = [event("ExecutionFailed"), entered("Deploy", {"x": 1})]
        sfn.add_execution(WORKFLOW, ExecutionStatus.FAILED, history=history, start_date=NOW - timedelta(hours=1))
        evt = _event("Update", StartTime=_millis(NOW - timedelta(days=1)))
        evt["PhysicalResourceId"] = "original-request-id"

        resp = on_event(evt, None, manager)

        assert resp["PhysicalResourceId"] == "original-request-id"
        assert resp["Data"]["CurrentStatus"] == "EXECUTION_STARTED"
        assert sfn.started[0]["input"] == {"resumeTo": "Deploy", "x": 1}
        assert set(resp["Data"]) == {"ActualStartTime", "CurrentStatus", "AttrTaskStates", "LastExecutionArn"}

    def test_exec_input_is_passed_through(self, manager, sfn):
        on_event(_event("Update", ExecInput='{"resumeTo": "Notify"}'), None, manager)
        assert sfn.started[0]["input"] == {"resumeTo": "Notify"}

    def test_dict_exec_input_overrides_failure_resume(self, manager, sfn):
        history = [event("ExecutionFailed"), entered("Deploy", {"x": 1})]
        sfn.add_execution(WORKFLOW, ExecutionStatus.FAILED, history=history, start_date=NOW - timedelta(hours=1))

        on_event(_event("Update", ExecInput={"resumeTo": "Build", "force": True}), None, manager)

        assert sfn.started[0]["input"] == {"resumeTo": "Build", "force": True}

    def test_non_object_exec_input_is_discarded(self, manager, sfn):
        sfn.add_execution(WORKFLOW, ExecutionStatus.RUNNING, start_date=NOW - timedelta(hours=1))

        resp = on_event(_event("Update", ExecInput=["Build"]), None, manager)

        assert sfn.started == []
        assert resp["Data"]["CurrentStatus"] == "RUNNING"

    @pytest.mark.parametrize("start_time", ["99999999999999999", "not-a-time"])
    def test_create_with_unusable_start_time_is_not_due(self, manager, sfn, start_time):
        resp = on_event(_event("Create", StartTime=start_time), None, manager)

        assert sfn.started == []
        assert resp["Data"]["CurrentStatus"] == ""

    def test_create_without_start_time_is_due(self, manager, sfn):
        on_event(_event("Create"), None, manager)
        assert len(sfn.started) == 1

    def test_delete_is_a_noop(self, manager, sfn):
        evt = _event("Delete")
        evt["PhysicalResourceId"] = "original-request-id"

        resp = on_event(evt, None, manager)

        assert resp == {"PhysicalResourceId": "original-request-id"}
        assert sfn.calls == []

    def test_unknown_request_type_raises(self, manager):
        with pytest.raises(UnsupportedRequestError):
            on_event(_event("Replace"), None, manager)


class TestParseEvent:
    def test_maps_resource_properties(self):
        request = parse_event(_event("Update", StartTime="1717243200000", ExecInput='{"a": 1}'))
        assert request.request_kind is RequestKind.UPDATE
        assert request.workflow_id == WORKFLOW
        assert request.manual_input == '{"a": 1}'
        assert request.scheduled_start_time == datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert request.last_cfn_update == "1717243200000"

    def test_missing_optional_properties(self):
        request = parse_event(_event("Create"))
        assert request.manual_input is None
        assert request.scheduled_start_time is None
        assert request.physical_resource_id is None


class TestParseStartTime:
    def test_epoch_millis(self):
        assert parse_start_time("0") == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_iso_timestamp_defaults_to_utc(self):
        assert parse_start_time("2025-06-01T12:00:00") == NOW

    def test_absent_is_none(self):
        assert parse_start_time(None) is None
        assert parse_start_time("") is None

    @pytest.mark.parametrize("raw", ["soon", "nan", "inf", "99999999999999999"])
    def test_unusable_value_is_never_due(self, raw):
        assert parse_start_time(raw) == NEVER
