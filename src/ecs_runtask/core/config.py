"""Configuration for ecs-runtask.

Holds the named constants of a run and the ``RunTaskConfig`` model built from
the action inputs.

Key Concepts:
    Constants: ``IGNORED_TASK_DEFINITION_ATTRIBUTES``, ``WAIT_DELAY_SECONDS``,
        ``MAX_WAIT_MINUTES`` and friends. Components never read them as
        globals; they take them as parameters (``ignored=``, ``WaitPolicy``)
        with these values as defaults.
    WaitPolicy: Frozen dataclass with the poll delay and the upper bound on
        the wait. Computes the waiter's ``MaxAttempts``.
    RunTaskConfig: Pydantic v2 model of the inputs. ``from_inputs()`` reads
        ``INPUT_*`` variables through ``ActionsToolkit``; keyword overrides
        (the CLI options) take precedence.

Architecture Decisions:
    - Pydantic v2 (not dataclass) for the inputs: coercion of ``count`` and
      ``field_validator``s for the pipe-delimited lists and the string flag.
    - Override precedence: kwargs > action inputs > field defaults.
    - Input errors surface as ``MissingInputError``/``InvalidInputError``,
      never as a raw ``pydantic.ValidationError``.

Tags:
    config, settings, pydantic, github-actions, inputs
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ecs_runtask.actions.toolkit import ActionsToolkit
from ecs_runtask.core.errors import InvalidInputError

AGENT = "amazon-ecs-run-task-for-github-actions"
DEFAULT_CLUSTER = "default"
DEFAULT_WAIT_MINUTES = 30
MAX_WAIT_MINUTES = 360
WAIT_DELAY_SECONDS = 5

# Returned by DescribeTaskDefinition but rejected by RegisterTaskDefinition
IGNORED_TASK_DEFINITION_ATTRIBUTES: frozenset[str] = frozenset(
    {
        "compatibilities",
        "taskDefinitionArn",
        "requiresAttributes",
        "revision",
        "status",
        "registeredAt",
        "registeredBy",
    }
)


@dataclass(frozen=True)
class WaitPolicy:
    """Polling bounds for the ``tasks_stopped`` waiter.

    >>> WaitPolicy().max_attempts(30)
    360
    >>> WaitPolicy().clamp(1000)
    360
    """

    delay_seconds: int = WAIT_DELAY_SECONDS
    max_wait_minutes: int = MAX_WAIT_MINUTES

    def clamp(self, wait_minutes: int) -> int:
        return min(wait_minutes, self.max_wait_minutes)

    def max_attempts(self, wait_minutes: int) -> int:
        return (self.clamp(wait_minutes) * 60) // self.delay_seconds


def split_delimited(raw: str, delimiter: str = "|") -> list[str]:
    """Split a delimited input into unique, non-empty, stripped parts.

    >>> split_delimited("subnet-a| subnet-b||subnet-a")
    ['subnet-a', 'subnet-b']
    """
    parts = (part.strip() for part in raw.split(delimiter))
    return list(dict.fromkeys(part for part in parts if part))


def parse_flag(raw: Any) -> bool:
    """Only the string ``true`` (any case) enables a flag."""
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    return str(raw).strip().lower() == "true"


# field name -> (input name, required)
INPUTS: dict[str, tuple[str, bool]] = {
    "task_definition": ("task-definition", True),
    "cluster": ("cluster", False),
    "count": ("count", True),
    "started_by": ("started-by", False),
    "wait_for_finish": ("wait-for-finish", False),
    "wait_for_minutes": ("wait-for-minutes", False),
    "subnets": ("subnets", True),
    "security_groups": ("security-groups", True),
}


class RunTaskConfig(BaseModel):
    """Validated inputs of one run.

    Example::

        config = RunTaskConfig(
            task_definition="task-def.json",
            count=1,
            subnets="subnet-1|subnet-2",
            security_groups="sg-1",
        )
        assert config.subnets == ["subnet-1", "subnet-2"]
    """

    task_definition: str = Field(description="Path to the task definition file")
    cluster: str = Field(default=DEFAULT_CLUSTER, description="Target ECS cluster")
    count: int = Field(ge=1, description="Number of tasks to launch")
    started_by: str = Field(default=AGENT, description="startedBy tag on launched tasks")
    wait_for_finish: bool = Field(default=False, description="Poll until the tasks stop")
    wait_for_minutes: int = Field(
        default=DEFAULT_WAIT_MINUTES,
        description=f"Wait bound in minutes, at most {MAX_WAIT_MINUTES}",
    )
    subnets: list[str] = Field(min_length=1, description="awsvpc subnets")
    security_groups: list[str] = Field(min_length=1, description="awsvpc security groups")

    workspace: Path = Field(default_factory=Path.cwd, description="Base for relative paths")
    region: str | None = Field(default=None, description="AWS region (SDK default if unset)")

    run_id: str = Field(default="", description="Unique run identifier (auto-generated)")

    @field_validator("cluster", mode="before")
    @classmethod
    def _default_cluster(cls, value: Any) -> Any:
        return value or DEFAULT_CLUSTER

    @field_validator("started_by", mode="before")
    @classmethod
    def _default_started_by(cls, value: Any) -> Any:
        return value or AGENT

    @field_validator("wait_for_finish", mode="before")
    @classmethod
    def _parse_wait_flag(cls, value: Any) -> bool:
        return parse_flag(value)

    @field_validator("wait_for_minutes", mode="before")
    @classmethod
    def _parse_wait_minutes(cls, value: Any) -> int:
        try:
            minutes = int(str(value).strip())
        except (TypeError, ValueError):
            return DEFAULT_WAIT_MINUTES
        if minutes < 1:
            return DEFAULT_WAIT_MINUTES
        return min(minutes, MAX_WAIT_MINUTES)

    @field_validator("subnets", "security_groups", mode="before")
    @classmethod
    def _split_pipes(cls, value: Any) -> Any:
        if isinstance(value, str):
            return split_delimited(value)
        return value

    @model_validator(mode="after")
    def _set_defaults(self) -> RunTaskConfig:
        if not self.run_id:
            self.run_id = uuid.uuid4().hex[:12]
        return self

    def resolve_task_definition_path(self) -> Path:
        path = Path(self.task_definition)
        return path if path.is_absolute() else self.workspace / path

    @classmethod
    def from_inputs(
        cls,
        toolkit: ActionsToolkit | None = None,
        **overrides: Any,
    ) -> RunTaskConfig:
        """Create config from the action inputs.

        ``None`` overrides are ignored so CLI options left unset fall through
        to the inputs.

        Raises:
            MissingInputError: A required input is absent and not overridden.
            InvalidInputError: An input fails validation.
        """
        toolkit = toolkit or ActionsToolkit()
        overrides = {key: value for key, value in overrides.items() if value is not None}

        values: dict[str, Any] = {"workspace": toolkit.workspace}
        for field_name, (input_name, required) in INPUTS.items():
            if field_name in overrides:
                continue
            raw = toolkit.get_input(input_name, required=required)
            if raw:
                values[field_name] = raw
        values.update(overrides)

        try:
            return cls(**values)
        except ValidationError as exc:
            first = exc.errors()[0]
            field_name = str(first["loc"][0]) if first["loc"] else "?"
            input_name = INPUTS.get(field_name, (field_name, False))[0]
            raise InvalidInputError(
                input_name,
                first.get("input"),
                f"Invalid value for input {input_name}: {first['msg']}",
            ) from exc


__all__ = [
    "AGENT",
    "DEFAULT_CLUSTER",
    "DEFAULT_WAIT_MINUTES",
    "MAX_WAIT_MINUTES",
    "WAIT_DELAY_SECONDS",
    "IGNORED_TASK_DEFINITION_ATTRIBUTES",
    "INPUTS",
    "WaitPolicy",
    "RunTaskConfig",
    "split_delimited",
    "parse_flag",
]
