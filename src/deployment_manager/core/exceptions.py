"""Deployment manager exception hierarchy."""

from __future__ import annotations


class DeploymentManagerError(Exception):
    """Base exception for all deployment manager errors."""


class WorkflowEngineError(DeploymentManagerError):
    """A call to the workflow engine failed."""

    def __init__(self, operation: str, target: str, message: str) -> None:
        self.operation = operation
        self.target = target
        super().__init__(f"{operation} failed for {target!r}: {message}")


class ListError(WorkflowEngineError):
    """Listing the executions of a state machine failed."""

    def __init__(self, target: str, message: str) -> None:
        super().__init__("ListExecutions", target, message)


class HistoryError(WorkflowEngineError):
    """Fetching the event history of an execution failed."""

    def __init__(self, target: str, message: str) -> None:
        super().__init__("GetExecutionHistory", target, message)


class StartError(WorkflowEngineError):
    """Starting a new execution failed."""

    def __init__(self, target: str, message: str) -> None:
        super().__init__("StartExecution", target, message)


class MalformedInputError(DeploymentManagerError):
    """A state input captured from history is not a JSON object."""


class ManualInputParseError(DeploymentManagerError):
    """The execution input supplied by the caller is not a JSON object."""


class UnsupportedRequestError(DeploymentManagerError):
    """The lifecycle event carries a request type we do not handle."""

    def __init__(self, request_type: str) -> None:
        self.request_type = request_type
        super().__init__(f"Unsupported request type: {request_type!r}")
