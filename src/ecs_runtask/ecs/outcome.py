"""Exit code evaluation for stopped tasks.

After the waiter reports every task STOPPED, DescribeTasks gives the final
container states. A run passes only if every container of every task exited
with code 0. All failing containers are reported together in one
``OutcomeError``.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ecs_runtask.core.errors import OutcomeError
from ecs_runtask.core.logging import get_logger
from ecs_runtask.core.result import Err, Ok, Result, partition_results

logger = get_logger(__name__)


@dataclass(frozen=True)
class ContainerOutcome:
    task_arn: str
    name: str | None
    exit_code: int | None
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        # A missing exit code means the container never ran to completion
        return self.exit_code == 0

    @property
    def failure_reason(self) -> str:
        if self.reason:
            return self.reason
        return f"{self.name} exited with code {self.exit_code}"


@dataclass
class TaskOutcome:
    task_arn: str
    stopped_reason: str | None = None
    containers: list[ContainerOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(container.succeeded for container in self.containers)

    @classmethod
    def from_task(cls, task: dict[str, Any]) -> TaskOutcome:
        arn = task.get("taskArn", "")
        return cls(
            task_arn=arn,
            stopped_reason=task.get("stoppedReason"),
            containers=[
                ContainerOutcome(
                    task_arn=arn,
                    name=container.get("name"),
                    exit_code=container.get("exitCode"),
                    reason=container.get("reason"),
                )
                for container in task.get("containers") or []
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def describe_outcomes(client: Any, cluster: str, task_arns: list[str]) -> Result[list[TaskOutcome]]:
    """Fetch the final state of ``task_arns``."""
    try:
        response = client.describe_tasks(cluster=cluster, tasks=task_arns)
    except (ClientError, BotoCoreError) as exc:
        return Err(
            OutcomeError(f"Failed to describe tasks: {exc}", cause=exc).with_context(
                cluster=cluster, task_arns=list(task_arns)
            )
        )
    return Ok([TaskOutcome.from_task(task) for task in response.get("tasks", [])])


def _check_container(container: ContainerOutcome) -> Result[ContainerOutcome]:
    if container.succeeded:
        return Ok(container)
    return Err(OutcomeError(container.failure_reason))


def evaluate_outcomes(outcomes: list[TaskOutcome]) -> Result[list[TaskOutcome]]:
    """Fail if any container across all tasks exited non-zero.

    The error message lists every failure reason as a JSON array, e.g.
    ``Run task failed: ["OutOfMemoryError"]``.
    """
    containers = [container for outcome in outcomes for container in outcome.containers]
    logger.debug(f"containers {json.dumps([asdict(c) for c in containers])}")
    logger.debug(f"exitCodes {json.dumps([c.exit_code for c in containers])}")
    logger.debug(f"reasons {json.dumps([c.reason for c in containers])}")

    _, errors = partition_results([_check_container(c) for c in containers])
    reasons = [str(error) for error in errors]
    logger.debug(f"failures {json.dumps(reasons)}")

    if reasons:
        failed_tasks = sorted({outcome.task_arn for outcome in outcomes if not outcome.succeeded})
        return Err(
            OutcomeError(
                f"Run task failed: {json.dumps(reasons)}",
                reasons=reasons,
            ).with_context(task_arns=failed_tasks)
        )
    return Ok(outcomes)


__all__ = [
    "ContainerOutcome",
    "TaskOutcome",
    "describe_outcomes",
    "evaluate_outcomes",
]
