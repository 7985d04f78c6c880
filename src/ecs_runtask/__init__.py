"""
ecs-runtask - run an Amazon ECS task definition on Fargate from CI.

Registers the task definition, launches the tasks, optionally waits for them
to stop, and fails the step if any container exited non-zero.
"""

__version__ = "0.1.0"

from ecs_runtask.core.config import RunTaskConfig, WaitPolicy
from ecs_runtask.results import RunReport, RunState
from ecs_runtask.workflow import RunTaskWorkflow

__all__ = [
    "RunTaskConfig",
    "WaitPolicy",
    "RunReport",
    "RunState",
    "RunTaskWorkflow",
]
