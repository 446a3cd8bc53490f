"""Lambda entry point for the ``Custom::DeploymentManager`` resource.

Wired as the ``onEvent`` handler of the custom resource provider. Create and
Update run the resume decision; Delete is a no-op because the state machine
itself belongs to the stack.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

import structlog

from deployment_manager.core.config import AppSettings
from deployment_manager.core.exceptions import UnsupportedRequestError
from deployment_manager.core.logging import configure_logging, get_logger
from deployment_manager.engine import create_engine
from deployment_manager.models.decision import LifecycleRequest, RequestKind
from deployment_manager.resume.attributes import (
    PROP_EXEC_INPUT,
    PROP_LAST_CFN_UPDATE,
    PROP_START_TIME,
    PROP_STATE_MACHINE_ARN,
)
from deployment_manager.resume.decision import ResumeDecisionEngine

logger = get_logger(__name__)

NEVER = datetime.max.replace(tzinfo=timezone.utc)


@lru_cache(maxsize=1)
def _default_decision_engine() -> ResumeDecisionEngine:
    settings = AppSettings()
    configure_logging(level=settings.log_level, fmt=settings.log_format)
    return ResumeDecisionEngine(create_engine(settings), settings=settings.sfn)


def parse_start_time(raw: Any) -> datetime | None:
    """Parse ``StartTime``: epoch milliseconds, or an ISO-8601 timestamp.

    Absent means due now. A value that is present but unusable maps to
    ``NEVER`` so the first run stays gated.
    """
    if raw is None or raw == "":
        return None
    try:
        return datetime.fromtimestamp(float(raw) / 1000, tz=timezone.utc)
    except (TypeError, ValueError):
        pass
    except (OverflowError, OSError):
        logger.warning("start_time_out_of_range", start_time=str(raw))
        return NEVER
    try:
        parsed = datetime.fromisoformat(str(raw))
    except ValueError:
        logger.warning("start_time_unparseable", start_time=str(raw))
        return NEVER
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def parse_event(event: dict[str, Any]) -> LifecycleRequest:
    request_type = event.get("RequestType", "")
    try:
        kind = RequestKind(request_type)
    except ValueError as exc:
        raise UnsupportedRequestError(request_type) from exc

    props = event.get("ResourceProperties") or {}
    manual_input = props.get(PROP_EXEC_INPUT)
    if manual_input is not None and not isinstance(manual_input, (str, dict)):
        logger.warning("manual_input_discarded", error=f"unsupported type {type(manual_input).__name__}")
        manual_input = None
    last_cfn_update = props.get(PROP_LAST_CFN_UPDATE)
    return LifecycleRequest(
        request_kind=kind,
        request_id=event["RequestId"],
        workflow_id=props.get(PROP_STATE_MACHINE_ARN, ""),
        scheduled_start_time=parse_start_time(props.get(PROP_START_TIME)),
        manual_input=manual_input,
        last_cfn_update=str(last_cfn_update) if last_cfn_update is not None else None,
        physical_resource_id=event.get("PhysicalResourceId"),
    )


def on_event(
    event: dict[str, Any],
    context: Any = None,
    decision_engine: ResumeDecisionEngine | None = None,
) -> dict[str, Any]:
    """Handle one custom resource lifecycle event."""
    request = parse_event(event)
    physical_id = request.physical_resource_id or request.request_id

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request.request_id,
        workflow_id=request.workflow_id,
    )
    logger.info(
        "lifecycle_event_received",
        request_kind=str(request.request_kind),
        last_cfn_update=request.last_cfn_update,
    )

    if request.request_kind is RequestKind.DELETE:
        return {"PhysicalResourceId": physical_id}

    engine = decision_engine or _default_decision_engine()
    result = engine.decide(
        request.request_kind,
        workflow_id=request.workflow_id,
        request_id=request.request_id,
        scheduled_start_time=request.scheduled_start_time,
        manual_input=request.manual_input,
    )
    data = result.to_attributes()
    logger.info("lifecycle_event_handled", **data)
    return {"PhysicalResourceId": physical_id, "Data": data}
