"""Amazon ECS stages of a run: load, register, launch, wait, evaluate."""

from ecs_runtask.ecs.client import console_hostname, console_url, create_ecs_client
from ecs_runtask.ecs.definition import clean_task_definition, is_empty, load_task_definition
from ecs_runtask.ecs.launcher import LaunchRequest, LaunchedTasks, check_launch, run_tasks
from ecs_runtask.ecs.outcome import ContainerOutcome, TaskOutcome, describe_outcomes, evaluate_outcomes
from ecs_runtask.ecs.registration import register_task_definition
from ecs_runtask.ecs.waiter import wait_for_tasks_stopped

__all__ = [
    "create_ecs_client",
    "console_hostname",
    "console_url",
    "is_empty",
    "clean_task_definition",
    "load_task_definition",
    "register_task_definition",
    "LaunchRequest",
    "LaunchedTasks",
    "run_tasks",
    "check_launch",
    "wait_for_tasks_stopped",
    "ContainerOutcome",
    "TaskOutcome",
    "describe_outcomes",
    "evaluate_outcomes",
]
