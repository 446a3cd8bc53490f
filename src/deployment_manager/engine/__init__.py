"""Pluggable workflow engine backends behind the IWorkflowEngine protocol."""

from __future__ import annotations

from deployment_manager.core.config import AppSettings
from deployment_manager.engine.sfn_backend import StepFunctionsWorkflowEngine


def create_engine(settings: AppSettings | None = None) -> StepFunctionsWorkflowEngine:
    """Create the Step Functions client from application settings."""
    if settings is None:
        settings = AppSettings()

    return StepFunctionsWorkflowEngine(
        region=settings.sfn.region,
        endpoint_url=settings.sfn.endpoint_url,
    )
