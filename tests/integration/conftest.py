"""Integration test fixtures for Step Functions on LocalStack."""

from __future__ import annotations

import json
import os

import boto3
import pytest

# Default LocalStack endpoint
LOCALSTACK_URL = os.environ.get("LOCALSTACK_URL", "http://localhost:4566")
ROLE_ARN = "arn:aws:iam::000000000000:role/deployment-manager-sfn"


def _localstack_available() -> bool:
    """Check if LocalStack is reachable."""
    try:
        client = boto3.client("stepfunctions", region_name="us-east-1", endpoint_url=LOCALSTACK_URL)
        client.list_state_machines()
        return True
    except Exception:
        return False


skip_no_localstack = pytest.mark.skipif(
    not _localstack_available(),
    reason="LocalStack not available",
)


@pytest.fixture(scope="session")
def localstack_sfn():
    """Step Functions client pointing at LocalStack."""
    return boto3.client("stepfunctions", region_name="us-east-1", endpoint_url=LOCALSTACK_URL)


@pytest.fixture
def failing_state_machine(localstack_sfn, request):
    """A two-state machine whose second state always fails."""
    definition = {
        "StartAt": "Build",
        "States": {
            "Build": {"Type": "Pass", "Next": "Deploy"},
            "Deploy": {"Type": "Fail", "Error": "DeployFailed", "Cause": "integration test"},
        },
    }
    resp = localstack_sfn.create_state_machine(
        name=f"DeploymentManager-{request.node.name}"[:80],
        definition=json.dumps(definition),
        roleArn=ROLE_ARN,
    )
    yield resp["stateMachineArn"]
    localstack_sfn.delete_state_machine(stateMachineArn=resp["stateMachineArn"])
