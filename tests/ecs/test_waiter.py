"""Tests for waiting on stopped tasks."""

from botocore.exceptions import WaiterError
from _support.ecs_responses import TASK_ARN_1, TASK_ARN_2

from ecs_runtask.core.config import WaitPolicy
from ecs_runtask.core.errors import TimeoutError, WaitError
from ecs_runtask.ecs.waiter import WAITER_NAME, wait_for_tasks_stopped

ARNS = [TASK_ARN_1, TASK_ARN_2]


class TestWaitForTasksStopped:
    def test_waits_with_policy(self, ecs_client):
        result = wait_for_tasks_stopped(ecs_client, "ci", ARNS, 30)

        assert result.unwrap() == ARNS
        ecs_client.get_waiter.assert_called_once_with(WAITER_NAME)
        ecs_client.get_waiter.return_value.wait.assert_called_once_with(
            cluster="ci",
            tasks=ARNS,
            WaiterConfig={"Delay": 5, "MaxAttempts": 360},
        )

    def test_minutes_clamped(self, ecs_client):
        wait_for_tasks_stopped(ecs_client, "ci", ARNS, 1000)
        config = ecs_client.get_waiter.return_value.wait.call_args.kwargs["WaiterConfig"]
        assert config["MaxAttempts"] == 360 * 60 // 5

    def test_custom_policy(self, ecs_client):
        wait_for_tasks_stopped(ecs_client, "ci", ARNS, 1, policy=WaitPolicy(delay_seconds=1))
        config = ecs_client.get_waiter.return_value.wait.call_args.kwargs["WaiterConfig"]
        assert config == {"Delay": 1, "MaxAttempts": 60}

    def test_timeout(self, ecs_client):
        ecs_client.get_waiter.return_value.wait.side_effect = WaiterError(
            name="TasksStopped",
            reason="Max attempts exceeded",
            last_response={"tasks": [{"lastStatus": "RUNNING"}]},
        )

        result = wait_for_tasks_stopped(ecs_client, "ci", ARNS, 10)

        assert isinstance(result.error, TimeoutError)
        assert result.error.message == "Tasks did not stop within 10 minutes"
        assert result.error.context.task_arns == ARNS
        ecs_client.stop_task.assert_not_called()

    def test_other_waiter_failure(self, ecs_client):
        ecs_client.get_waiter.return_value.wait.side_effect = WaiterError(
            name="TasksStopped",
            reason="Waiter encountered a terminal failure state",
            last_response={"failures": [{"reason": "MISSING"}]},
        )

        result = wait_for_tasks_stopped(ecs_client, "ci", ARNS, 10)

        assert isinstance(result.error, WaitError)
        assert "terminal failure state" in result.error.message
