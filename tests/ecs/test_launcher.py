"""Tests for the Fargate task launch."""

from botocore.exceptions import ClientError
from _support.ecs_responses import TASK_ARN_1, TASK_ARN_2, TASK_DEFINITION_ARN

from ecs_runtask.core.config import AGENT
from ecs_runtask.core.errors import LaunchError
from ecs_runtask.ecs.launcher import (
    LAUNCH_TYPE,
    LaunchedTasks,
    LaunchFailure,
    LaunchRequest,
    check_launch,
    run_tasks,
)


def _request(**overrides) -> LaunchRequest:
    values = {
        "task_definition_arn": TASK_DEFINITION_ARN,
        "count": 2,
        "subnets": ["subnet-a", "subnet-b"],
        "security_groups": ["sg-1"],
        "cluster": "ci",
    }
    values.update(overrides)
    return LaunchRequest(**values)


class TestLaunchRequest:
    def test_run_task_kwargs(self):
        assert _request().to_run_task_kwargs() == {
            "cluster": "ci",
            "taskDefinition": TASK_DEFINITION_ARN,
            "count": 2,
            "startedBy": AGENT,
            "launchType": "FARGATE",
            "networkConfiguration": {
                "awsvpcConfiguration": {
                    "subnets": ["subnet-a", "subnet-b"],
                    "securityGroups": ["sg-1"],
                },
            },
        }

    def test_launch_type_is_fargate(self):
        assert LAUNCH_TYPE == "FARGATE"


class TestRunTasks:
    def test_success(self, ecs_client):
        result = run_tasks(ecs_client, _request(started_by="release"))

        launched = result.unwrap()
        assert launched.task_arns == [TASK_ARN_1, TASK_ARN_2]
        assert launched.failures == []
        kwargs = ecs_client.run_task.call_args.kwargs
        assert kwargs["startedBy"] == "release"
        assert kwargs["launchType"] == "FARGATE"

    def test_failures_are_not_an_error(self, ecs_client):
        ecs_client.run_task.return_value = {
            "tasks": [{"taskArn": TASK_ARN_1}],
            "failures": [{"arn": "X", "reason": "RESOURCE:MEMORY"}],
        }
        launched = run_tasks(ecs_client, _request()).unwrap()
        assert launched.task_arns == [TASK_ARN_1]
        assert launched.failures == [LaunchFailure(arn="X", reason="RESOURCE:MEMORY")]

    def test_sdk_error(self, ecs_client):
        ecs_client.run_task.side_effect = ClientError(
            {"Error": {"Code": "ClusterNotFoundException", "Message": "Cluster not found."}},
            "RunTask",
        )
        result = run_tasks(ecs_client, _request())
        assert isinstance(result.error, LaunchError)
        assert result.error.message.startswith("Failed to run task in ECS: ")
        assert result.error.context.cluster == "ci"


class TestCheckLaunch:
    def test_no_failures(self):
        assert check_launch(LaunchedTasks([TASK_ARN_1])).unwrap() == [TASK_ARN_1]

    def test_single_failure_message(self):
        result = check_launch(LaunchedTasks([], [LaunchFailure("X", "RESOURCE:MEMORY")]))
        assert isinstance(result.error, LaunchError)
        assert result.error.message == "X is RESOURCE:MEMORY"

    def test_all_failures_reported_and_started_tasks_kept(self):
        launched = LaunchedTasks(
            [TASK_ARN_1],
            [LaunchFailure("X", "RESOURCE:MEMORY"), LaunchFailure("Y", "AGENT")],
        )
        result = check_launch(launched)
        assert result.error.message == "X is RESOURCE:MEMORY; Y is AGENT"
        assert result.error.context.task_arns == [TASK_ARN_1]
        assert len(result.error.context.metadata["failures"]) == 2
