"""Run orchestration: register → launch → [wait → evaluate].

``RunTaskWorkflow`` is the run-level state machine. Each stage is a function
returning ``Result``; the workflow joins them with ``flat_map`` so the first
``Err`` ends the run and every later stage is skipped.

Why This Matters:
    A run has remote side effects that are never undone: a registered
    revision stays registered, launched tasks keep running after a timeout,
    and with ``wait_for_finish`` off the run ends right after launch without
    looking at the tasks again. Keeping the stages as one explicit chain
    makes it obvious which of those side effects a failed run has already
    caused. The report's ``history`` records the same thing after the fact.

Key Concepts:
    RunTaskWorkflow: Config + ECS client + output sink → ``RunReport``.
    Publish: ``(name, value) -> None``. In the action this is
        ``ActionsToolkit.set_output``; outputs are published as soon as they
        exist, so ``task-definition-arn`` is set even when the launch fails.

State machine::

    IDLE → REGISTERING → REGISTERED → LAUNCHING → LAUNCHED
         → [WAITING → STOPPED → EVALUATING] → SUCCEEDED
    (any non-terminal state) → FAILED

Related Modules:
    - :mod:`ecs_runtask.ecs` - the stage functions
    - :mod:`ecs_runtask.results` - RunReport and RunState
    - :mod:`ecs_runtask.cli.app` - builds the workflow from action inputs
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from ecs_runtask.core.config import IGNORED_TASK_DEFINITION_ATTRIBUTES, RunTaskConfig, WaitPolicy
from ecs_runtask.core.errors import RunTaskError
from ecs_runtask.core.logging import LogContext, get_logger
from ecs_runtask.core.result import Err, Ok, Result
from ecs_runtask.ecs.client import client_region, console_url
from ecs_runtask.ecs.definition import load_task_definition
from ecs_runtask.ecs.launcher import LaunchedTasks, LaunchRequest, check_launch, run_tasks
from ecs_runtask.ecs.outcome import TaskOutcome, describe_outcomes, evaluate_outcomes
from ecs_runtask.ecs.registration import register_task_definition
from ecs_runtask.ecs.waiter import wait_for_tasks_stopped
from ecs_runtask.results import ContainerResult, RunReport, RunState, TaskResult

logger = get_logger(__name__)

Publish = Callable[[str, Any], None]

TASK_DEFINITION_ARN_OUTPUT = "task-definition-arn"
RUN_TASK_ARN_OUTPUT = "run-task-arn"


def _discard(name: str, value: Any) -> None:
    return None


class RunTaskWorkflow:
    """Runs one task definition on Fargate and reports the outcome.

    Parameters
    ----------
    config
        Validated run inputs.
    client
        boto3 ECS client (or anything with the same methods).
    publish
        Output sink, called with ``task-definition-arn`` and ``run-task-arn``.
    policy
        Waiter bounds.
    ignored
        Task definition attributes stripped before registration.

    Example::

        toolkit = ActionsToolkit()
        config = RunTaskConfig.from_inputs(toolkit)
        report = RunTaskWorkflow(config, create_ecs_client(), toolkit.set_output).run()
        if not report.succeeded:
            toolkit.set_failed(report.error)
    """

    def __init__(
        self,
        config: RunTaskConfig,
        client: Any,
        publish: Publish | None = None,
        *,
        policy: WaitPolicy | None = None,
        ignored: Iterable[str] = IGNORED_TASK_DEFINITION_ATTRIBUTES,
    ) -> None:
        self.config = config
        self.client = client
        self.publish = publish or _discard
        self.policy = policy or WaitPolicy()
        self.ignored = frozenset(ignored)
        self.report = RunReport(run_id=config.run_id, cluster=config.cluster)

    def run(self) -> RunReport:
        """Execute the run. Never raises for an expected stage failure."""
        with LogContext(run_id=self.config.run_id):
            result = self._register().flat_map(self._launch)
            if self.config.wait_for_finish:
                self.report.waited = True
                result = result.flat_map(self._wait).flat_map(self._evaluate)
            else:
                result = result.inspect(lambda _: logger.debug("Not waiting for the task to stop"))

            match result:
                case Ok(_):
                    self.report.transition(RunState.SUCCEEDED)
                case Err(error):
                    self._fail(error)

        self.report.mark_complete()
        return self.report

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _register(self) -> Result[str]:
        self.report.transition(RunState.REGISTERING)
        return (
            load_task_definition(
                self.config.task_definition,
                self.config.workspace,
                self.ignored,
            )
            .flat_map(lambda document: register_task_definition(self.client, document))
            .inspect(self._registered)
        )

    def _registered(self, arn: str) -> None:
        self.report.task_definition_arn = arn
        self.publish(TASK_DEFINITION_ARN_OUTPUT, arn)
        self.report.transition(RunState.REGISTERED)

    def _launch(self, task_definition_arn: str) -> Result[list[str]]:
        self.report.transition(RunState.LAUNCHING)
        request = LaunchRequest(
            task_definition_arn=task_definition_arn,
            count=self.config.count,
            subnets=self.config.subnets,
            security_groups=self.config.security_groups,
            cluster=self.config.cluster,
            started_by=self.config.started_by,
        )
        return run_tasks(self.client, request).inspect(self._launched).flat_map(check_launch)

    def _launched(self, launched: LaunchedTasks) -> None:
        self.report.task_arns = list(launched.task_arns)
        self.publish(RUN_TASK_ARN_OUTPUT, list(launched.task_arns))

        url = console_url(client_region(self.client), self.config.cluster)
        self.report.console_url = url
        logger.info(f"Task running: {url}")
        self.report.transition(RunState.LAUNCHED)

    def _wait(self, task_arns: list[str]) -> Result[list[str]]:
        self.report.transition(RunState.WAITING)
        return wait_for_tasks_stopped(
            self.client,
            self.config.cluster,
            task_arns,
            self.config.wait_for_minutes,
            self.policy,
        ).inspect(lambda _: self.report.transition(RunState.STOPPED))

    def _evaluate(self, task_arns: list[str]) -> Result[list[TaskOutcome]]:
        self.report.transition(RunState.EVALUATING)
        return (
            describe_outcomes(self.client, self.config.cluster, task_arns)
            .inspect(self._record_outcomes)
            .flat_map(evaluate_outcomes)
        )

    def _record_outcomes(self, outcomes: list[TaskOutcome]) -> None:
        self.report.tasks = [
            TaskResult(
                task_arn=outcome.task_arn,
                stopped_reason=outcome.stopped_reason,
                containers=[
                    ContainerResult(name=c.name, exit_code=c.exit_code, reason=c.reason)
                    for c in outcome.containers
                ],
            )
            for outcome in outcomes
        ]

    def _fail(self, error: Exception) -> None:
        stage = self.report.state
        self.report.transition(RunState.FAILED)
        self.report.error = str(error)
        if isinstance(error, RunTaskError):
            error.with_context(run_id=self.config.run_id, stage=stage.value)
            self.report.error_detail = error.to_dict()
            logger.debug(f"Run failed during {stage.value}", **error.to_dict())
        else:
            logger.debug(f"Run failed during {stage.value}: {error!r}")


__all__ = [
    "Publish",
    "RunTaskWorkflow",
    "TASK_DEFINITION_ARN_OUTPUT",
    "RUN_TASK_ARN_OUTPUT",
]
