"""Show the last execution of a state machine and where a resume would start.

Read-only: nothing is started.

Usage:
    python scripts/inspect_execution.py arn:aws:states:us-east-1:123456789012:stateMachine:DeploymentManager-App
    python scripts/inspect_execution.py <arn> --target-state Deploy --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from deployment_manager.core.exceptions import WorkflowEngineError
from deployment_manager.engine.sfn_backend import StepFunctionsWorkflowEngine
from deployment_manager.resume.analyzer import analyze


def inspect_last_execution(
    engine: Any, state_machine_arn: str, target_state: str | None = None,
    max_events: int = 1000,
) -> dict[str, Any]:
    """Return a report of the last execution and its Continuation."""
    executions = engine.list_executions(state_machine_arn, limit=1)
    if not executions:
        return {"stateMachineArn": state_machine_arn, "lastExecution": None, "continuation": None}

    last = executions[0]
    history = engine.get_execution_history(
        last.execution_arn, max_events=max_events, reverse_order=True
    )
    continuation = analyze(history, target_state=target_state)
    return {
        "stateMachineArn": state_machine_arn,
        "lastExecution": {
            "executionArn": last.execution_arn,
            "status": str(last.status),
            "startDate": last.start_date.isoformat(),
            "events": len(history),
        },
        "continuation": continuation.model_dump(by_alias=True),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect the resume point of a state machine")
    parser.add_argument("state_machine_arn", help="State machine ARN")
    parser.add_argument("--target-state", default=None, help="Resume into this state instead")
    parser.add_argument("--endpoint-url", default=None, help="Step Functions endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    parser.add_argument("--max-events", type=int, default=1000, help="History events to scan")
    args = parser.parse_args()

    engine = StepFunctionsWorkflowEngine(region=args.region, endpoint_url=args.endpoint_url)
    try:
        report = inspect_last_execution(
            engine, args.state_machine_arn, args.target_state, args.max_events
        )
    except WorkflowEngineError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
