"""Waiting for launched tasks to stop.

The botocore ``tasks_stopped`` waiter polls DescribeTasks for the whole set of
ARNs at once and succeeds when every task reports ``lastStatus == STOPPED``.
The bound is expressed as minutes and converted to the waiter's attempt count
through ``WaitPolicy``. A timeout does not stop the tasks; they keep running
in the cluster.
"""

from __future__ import annotations

import json
from typing import Any

from botocore.exceptions import WaiterError

from ecs_runtask.core.config import WaitPolicy
from ecs_runtask.core.errors import TimeoutError, WaitError
from ecs_runtask.core.logging import get_logger
from ecs_runtask.core.result import Err, Ok, Result

logger = get_logger(__name__)

WAITER_NAME = "tasks_stopped"
MAX_ATTEMPTS_REASON = "Max attempts exceeded"


def wait_for_tasks_stopped(
    client: Any,
    cluster: str,
    task_arns: list[str],
    wait_minutes: int,
    policy: WaitPolicy | None = None,
) -> Result[list[str]]:
    """Block until every task in ``task_arns`` is STOPPED or the bound passes.

    Returns:
        Ok with ``task_arns``; Err(TimeoutError) when the attempts run out;
        Err(WaitError) when the waiter fails for another reason.
    """
    policy = policy or WaitPolicy()
    minutes = policy.clamp(wait_minutes)
    max_attempts = policy.max_attempts(minutes)

    logger.debug(
        f"Waiting for tasks to stop (delay={policy.delay_seconds}s, "
        f"max_attempts={max_attempts}, minutes={minutes})"
    )
    waiter = client.get_waiter(WAITER_NAME)
    try:
        waiter.wait(
            cluster=cluster,
            tasks=task_arns,
            WaiterConfig={"Delay": policy.delay_seconds, "MaxAttempts": max_attempts},
        )
    except WaiterError as exc:
        logger.debug(f"Waiter last response {json.dumps(exc.last_response, default=str)}")
        if MAX_ATTEMPTS_REASON in str(exc.kwargs.get("reason", "")):
            error = TimeoutError(
                f"Tasks did not stop within {minutes} minutes",
                cause=exc,
            )
        else:
            error = WaitError(f"Failed waiting for tasks to stop: {exc}", cause=exc)
        return Err(error.with_context(cluster=cluster, task_arns=list(task_arns)))

    logger.info("All tasks have stopped.")
    return Ok(list(task_arns))


__all__ = ["WAITER_NAME", "wait_for_tasks_stopped"]
