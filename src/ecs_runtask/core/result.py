"""
Result envelope for the run pipeline.

A run is a strict chain of stages (load → register → launch → wait →
evaluate). Each stage returns ``Ok[T]`` with its value or ``Err[T]`` with a
typed ``RunTaskError``; stages are joined with ``flat_map`` so the first
``Err`` short-circuits everything after it. Nothing is rolled back: an ``Err``
simply stops the chain, which keeps "what already happened remotely" visible in
one place.

Manifesto:
    - **Explicit over Implicit:** A stage's failure is a value, not a raise
    - **Short-circuit:** ``Err`` flows through ``map``/``flat_map`` unchanged
    - **Bridge:** ``try_result_with`` turns SDK/parser exceptions into ``Err``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     Result[T]                                │
        ├─────────────────┬─────────────────┬─────────────────────────┤
        │     Ok[T]       │     Err[T]      │     Utilities           │
        ├─────────────────┼─────────────────┼─────────────────────────┤
        │ • value: T      │ • error: Exc    │ • try_result_with()     │
        │ • map()         │ • map_err()     │ • partition_results()   │
        │ • flat_map()    │ • or_else()     │                         │
        │ • unwrap()      │ • unwrap_or()   │                         │
        └─────────────────┴─────────────────┴─────────────────────────┘

Examples:
    >>> Ok(2).map(lambda x: x * 2).unwrap()
    4
    >>> Err(ValueError("x")).map(lambda x: x * 2).is_err()
    True

Usage:
    from ecs_runtask.core.result import Result, Ok, Err

    result = (
        load_task_definition(path, workspace)
        .flat_map(lambda doc: register_task_definition(client, doc))
    )
    match result:
        case Ok(arn):
            ...
        case Err(error):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from ecs_runtask.core.errors import RunTaskError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or default (always returns value for Ok)."""
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform error if Err (no-op for Ok)."""
        return self

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """Return self if Ok, otherwise call f with error."""
        return self

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """Call f with value for side effects, return self."""
        f(self.value)
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        """Call f with error for side effects (no-op for Ok)."""
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    ``map`` and ``flat_map`` return the same error unchanged, so a chain of
    stages stops at the first failure. ``unwrap`` raises the error.
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        """Get default since this is Err."""
        return default

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """Call f with error to try recovery."""
        return f(self.error)

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """No-op for Err."""
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        """Call f with error for side effects, return self."""
        f(self.error)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.error, RunTaskError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for Result
Result = Ok[T] | Err[T]


def try_result_with(
    f: Callable[[], T],
    error_mapper: Callable[[Exception], Exception] | None = None,
    *,
    catch: tuple[type[Exception], ...] = (Exception,),
) -> Result[T]:
    """
    Execute ``f`` and map the exceptions listed in ``catch`` to an error type.

    Exceptions outside ``catch`` propagate, so programming errors are not
    folded into a run failure.

    Examples:
        >>> try_result_with(lambda: int("7")).unwrap()
        7
        >>> r = try_result_with(lambda: int("x"), lambda e: ParseError(str(e)), catch=(ValueError,))
        >>> type(r.error).__name__
        'ParseError'
    """
    try:
        return Ok(f())
    except catch as e:
        if error_mapper:
            return Err(error_mapper(e))
        return Err(e)


def partition_results(
    results: list[Result[T]],
) -> tuple[list[T], list[Exception]]:
    """
    Partition results into successes and failures.

    >>> values, errors = partition_results([Ok(1), Err(ValueError("a")), Ok(2)])
    >>> values
    [1, 2]
    >>> len(errors)
    1
    """
    values = []
    errors = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                errors.append(error)
    return values, errors


__all__ = [
    "Ok",
    "Err",
    "Result",
    "try_result_with",
    "partition_results",
]
