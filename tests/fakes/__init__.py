"""Shared test doubles: re-export the memory engine and history builders."""

from __future__ import annotations

from deployment_manager.engine.memory_backend import MemoryWorkflowEngine
from tests.fakes.history import entered, event, exited

__all__ = ["MemoryWorkflowEngine", "entered", "event", "exited"]
