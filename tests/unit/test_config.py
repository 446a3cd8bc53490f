"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

from deployment_manager.core.config import AppSettings, StepFunctionsConfig


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.log_format == "json"
    assert settings.sfn.max_history_events == 1000


def test_sfn_config_defaults():
    config = StepFunctionsConfig()
    assert config.region == "us-east-1"
    assert config.endpoint_url is None
    assert config.execution_name_prefix == "DeploymentManager"


def test_sfn_config_env_override(monkeypatch):
    monkeypatch.setenv("DEPLOYMGR_SFN_ENDPOINT_URL", "http://localhost:4566")
    monkeypatch.setenv("DEPLOYMGR_SFN_MAX_HISTORY_EVENTS", "250")
    config = StepFunctionsConfig()
    assert config.endpoint_url == "http://localhost:4566"
    assert config.max_history_events == 250
