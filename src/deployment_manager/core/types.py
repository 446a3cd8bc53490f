"""Type aliases used across the deployment manager."""

from __future__ import annotations

from typing import Any

JsonDict = dict[str, Any]
StateMachineArn = str
ExecutionArn = str
