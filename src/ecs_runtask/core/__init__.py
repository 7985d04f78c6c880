"""
Core primitives shared by every stage of a run.

- :mod:`ecs_runtask.core.errors` - typed error hierarchy
- :mod:`ecs_runtask.core.result` - Ok/Err result envelope
- :mod:`ecs_runtask.core.logging` - structlog configuration
- :mod:`ecs_runtask.core.config` - run constants and input model
"""

from ecs_runtask.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    InvalidInputError,
    LaunchError,
    MissingInputError,
    OutcomeError,
    ParseError,
    RegistrationError,
    RunTaskError,
    TimeoutError,
    WaitError,
)
from ecs_runtask.core.result import Err, Ok, Result, partition_results, try_result_with

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
    "Ok",
    "Err",
    "Result",
    "try_result_with",
    "partition_results",
]
