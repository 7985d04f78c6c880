"""
Structured error types for ecs-runtask.

Every failure of a run is one of a small set of typed errors. Each carries a
category for classification, a retryable flag (always False here: a run is a
single attempt), structured context for debug logging, and an optional chained
cause.

Manifesto:
    - **Typed Error Hierarchy:** One error type per run stage
    - **Terminal by default:** Nothing in a run is retried
    - **Rich Context:** Errors carry the path, cluster or task ARNs involved
    - **Error Chaining:** The botocore/yaml exception is kept as ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                        RunTaskError                              │
        │  (category, retryable, context, cause)                          │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ConfigError          ParseError          RegistrationError      │
        │  (CONFIG)             (PARSE)             (REGISTRATION)         │
        │     │                                                            │
        │  MissingInputError    LaunchError         TimeoutError           │
        │  InvalidInputError    (LAUNCH)            WaitError (WAIT)       │
        │                                                                  │
        │                       OutcomeError                               │
        │                       (OUTCOME)                                  │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = LaunchError("arn:aws:ecs:task/abc is RESOURCE:MEMORY")
    >>> error.category
    <ErrorCategory.LAUNCH: 'LAUNCH'>
    >>> error.with_context(cluster="ci").context.cluster
    'ci'

Tags:
    error-handling, exception-hierarchy, error-context, ecs-runtask
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Error categories, one per stage of a run.

    Attributes:
        CONFIG: Missing or invalid action inputs
        PARSE: Unreadable or malformed task definition file
        REGISTRATION: ECS rejected the task definition
        LAUNCH: RunTask raised or reported per-task failures
        WAIT: Tasks did not stop within the wait bound
        OUTCOME: One or more containers exited non-zero
        INTERNAL: Bugs, unexpected state
    """

    CONFIG = "CONFIG"
    PARSE = "PARSE"
    REGISTRATION = "REGISTRATION"
    LAUNCH = "LAUNCH"
    WAIT = "WAIT"
    OUTCOME = "OUTCOME"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error for debug logging.

    Only the fields relevant to the failing stage are set; ``to_dict()`` drops
    the rest.

    Attributes:
        run_id: Identifier of the run (see ``RunTaskConfig.run_id``)
        stage: Workflow state in which the error occurred
        path: Task definition file path
        cluster: Target ECS cluster
        task_definition_arn: Registered task definition
        task_arns: Launched task ARNs
        metadata: Additional key-value pairs
    """

    run_id: str | None = None
    stage: str | None = None
    path: str | None = None
    cluster: str | None = None
    task_definition_arn: str | None = None
    task_arns: list[str] | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["run_id", "stage", "path", "cluster", "task_definition_arn", "task_arns"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class RunTaskError(Exception):
    """
    Base exception for all ecs-runtask errors.

    Subclasses set ``default_category``. ``retryable`` exists so errors
    serialize the same way as the rest of the error envelope, but no stage of a
    run ever retries.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> RunTaskError:
        """
        Add context to this error (fluent API).

        Usage:
            return Err(LaunchError(msg).with_context(cluster=cluster, task_arns=arns))
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(RunTaskError):
    """Configuration error. The workflow file must be fixed."""

    default_category = ErrorCategory.CONFIG


class MissingInputError(ConfigError):
    """A required action input is missing."""

    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(message or f"Input required and not supplied: {name}")


class InvalidInputError(ConfigError):
    """An action input has an invalid value."""

    def __init__(self, name: str, value: Any, message: str | None = None):
        self.name = name
        self.value = value
        super().__init__(message or f"Invalid value for input {name}: {value!r}")


# =============================================================================
# RUN STAGE ERRORS
# =============================================================================


class ParseError(RunTaskError):
    """Task definition file could not be read or parsed."""

    default_category = ErrorCategory.PARSE


class RegistrationError(RunTaskError):
    """RegisterTaskDefinition failed."""

    default_category = ErrorCategory.REGISTRATION


class LaunchError(RunTaskError):
    """RunTask failed or reported failures for some tasks."""

    default_category = ErrorCategory.LAUNCH


class TimeoutError(RunTaskError):  # noqa: A001
    """Tasks did not reach STOPPED within the wait bound."""

    default_category = ErrorCategory.WAIT


class WaitError(RunTaskError):
    """The tasks_stopped waiter failed for a reason other than the bound."""

    default_category = ErrorCategory.WAIT


class OutcomeError(RunTaskError):
    """
    One or more containers exited with a non-zero code.

    ``reasons`` holds every failure reason, in task/container order.
    """

    default_category = ErrorCategory.OUTCOME

    def __init__(self, message: str, *, reasons: list[str] | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.reasons = reasons or []

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.reasons:
            result["reasons"] = list(self.reasons)
        return result


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "RunTaskError",
    "ConfigError",
    "MissingInputError",
    "InvalidInputError",
    "ParseError",
    "RegistrationError",
    "LaunchError",
    "TimeoutError",
    "WaitError",
    "OutcomeError",
]
