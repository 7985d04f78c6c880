"""Fargate task launch."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ecs_runtask.core.config import AGENT, DEFAULT_CLUSTER
from ecs_runtask.core.errors import LaunchError
from ecs_runtask.core.logging import get_logger
from ecs_runtask.core.result import Err, Ok, Result

logger = get_logger(__name__)

LAUNCH_TYPE = "FARGATE"


@dataclass(frozen=True)
class LaunchRequest:
    """Parameters of one RunTask call."""

    task_definition_arn: str
    count: int
    subnets: list[str]
    security_groups: list[str]
    cluster: str = DEFAULT_CLUSTER
    started_by: str = AGENT

    def to_run_task_kwargs(self) -> dict[str, Any]:
        return {
            "cluster": self.cluster,
            "taskDefinition": self.task_definition_arn,
            "count": self.count,
            "startedBy": self.started_by,
            "launchType": LAUNCH_TYPE,
            "networkConfiguration": {
                "awsvpcConfiguration": {
                    "subnets": list(self.subnets),
                    "securityGroups": list(self.security_groups),
                },
            },
        }


@dataclass(frozen=True)
class LaunchFailure:
    arn: str | None
    reason: str | None

    def __str__(self) -> str:
        return f"{self.arn} is {self.reason}"


@dataclass
class LaunchedTasks:
    """What RunTask reported: started task ARNs and per-task failures."""

    task_arns: list[str] = field(default_factory=list)
    failures: list[LaunchFailure] = field(default_factory=list)

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> LaunchedTasks:
        return cls(
            task_arns=[task["taskArn"] for task in response.get("tasks", [])],
            failures=[
                LaunchFailure(arn=failure.get("arn"), reason=failure.get("reason"))
                for failure in response.get("failures", [])
            ],
        )


def run_tasks(client: Any, request: LaunchRequest) -> Result[LaunchedTasks]:
    """Call RunTask.

    Per-task failures do not make this an ``Err``: the caller publishes the
    ARNs that did start before failing the run (see ``check_launch``).
    SDK errors are an ``Err(LaunchError)``.
    """
    kwargs = request.to_run_task_kwargs()
    logger.debug(
        "Running task with "
        + json.dumps(
            {
                "cluster": request.cluster,
                "taskDefinition": request.task_definition_arn,
                "count": request.count,
                "startedBy": request.started_by,
            }
        )
    )
    try:
        response = client.run_task(**kwargs)
    except (ClientError, BotoCoreError) as exc:
        return Err(
            LaunchError(f"Failed to run task in ECS: {exc}", cause=exc).with_context(
                cluster=request.cluster,
                task_definition_arn=request.task_definition_arn,
            )
        )

    logger.debug(f"Run task response {json.dumps(response, default=str)}")
    return Ok(LaunchedTasks.from_response(response))


def check_launch(launched: LaunchedTasks) -> Result[list[str]]:
    """Fail when RunTask reported any failure, even if some tasks started.

    >>> check_launch(LaunchedTasks(["arn:t/1"])).unwrap()
    ['arn:t/1']
    """
    if launched.failures:
        return Err(
            LaunchError("; ".join(str(failure) for failure in launched.failures)).with_context(
                task_arns=list(launched.task_arns),
                failures=[{"arn": f.arn, "reason": f.reason} for f in launched.failures],
            )
        )
    return Ok(list(launched.task_arns))


__all__ = [
    "LAUNCH_TYPE",
    "LaunchRequest",
    "LaunchFailure",
    "LaunchedTasks",
    "run_tasks",
    "check_launch",
]
