"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class StepFunctionsConfig(BaseSettings):
    """Step Functions client and execution configuration."""

    model_config = {"env_prefix": "DEPLOYMGR_SFN_"}

    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override
    max_history_events: int = 1000
    execution_name_prefix: str = "DeploymentManager"


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "DEPLOYMGR_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    sfn: StepFunctionsConfig = StepFunctionsConfig()
