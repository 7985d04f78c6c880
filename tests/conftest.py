"""
Shared pytest fixtures for ecs-runtask tests.

This module provides:
- A MagicMock ECS client with canned RegisterTaskDefinition, RunTask,
  DescribeTasks and waiter behavior
- Task definition files in a temporary workspace
- An ActionsToolkit wired to a dict environment and a GITHUB_OUTPUT file

No test talks to AWS. Response builders live in ``_support.ecs_responses``.
"""

import json
import sys
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import structlog

# Ensure the package and the test helpers are importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from _support.ecs_responses import (
    TASK_ARN_1,
    TASK_ARN_2,
    TASK_DEFINITION_ARN,
    make_container,
    make_task,
)
from ecs_runtask.actions.toolkit import ActionsToolkit
from ecs_runtask.core.config import RunTaskConfig


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Every test here runs without AWS access."""
    for item in items:
        item.add_marker(pytest.mark.unit)


# =============================================================================
# Task definition fixtures
# =============================================================================


@pytest.fixture
def task_definition_document() -> dict[str, Any]:
    """DescribeTaskDefinition-shaped document with generated attributes."""
    return {
        "taskDefinitionArn": TASK_DEFINITION_ARN,
        "family": "migrate",
        "revision": 6,
        "status": "ACTIVE",
        "networkMode": "awsvpc",
        "requiresCompatibilities": ["FARGATE"],
        "compatibilities": ["EC2", "FARGATE"],
        "requiresAttributes": [{"name": "com.amazonaws.ecs.capability.logging-driver.awslogs"}],
        "registeredAt": "2024-01-01T00:00:00Z",
        "registeredBy": "arn:aws:iam::123456789012:user/ci",
        "cpu": "256",
        "memory": "512",
        "executionRoleArn": "",
        "containerDefinitions": [
            {
                "name": "app",
                "image": "public.ecr.aws/docker/library/busybox:latest",
                "essential": True,
                "command": ["sh", "-c", "echo migrate"],
                "environment": [],
                "portMappings": [],
                "mountPoints": [],
                "volumesFrom": [],
                "secrets": None,
            }
        ],
        "volumes": [],
        "placementConstraints": [],
    }


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def task_definition_file(workspace: Path, task_definition_document: dict) -> Path:
    path = workspace / "task-def.json"
    path.write_text(json.dumps(task_definition_document), encoding="utf-8")
    return path


# =============================================================================
# ECS client fixture
# =============================================================================


@pytest.fixture
def ecs_client() -> MagicMock:
    """ECS client where every call succeeds and every container exits 0."""
    client = MagicMock(name="ecs")
    client.meta.region_name = "us-east-1"
    client.register_task_definition.return_value = {
        "taskDefinition": {"taskDefinitionArn": TASK_DEFINITION_ARN, "revision": 7}
    }
    client.run_task.return_value = {
        "tasks": [{"taskArn": TASK_ARN_1}, {"taskArn": TASK_ARN_2}],
        "failures": [],
    }
    client.describe_tasks.return_value = {
        "tasks": [
            make_task(TASK_ARN_1, [make_container("app", 0)]),
            make_task(TASK_ARN_2, [make_container("app", 0), make_container("sidecar", 0)]),
        ],
        "failures": [],
    }
    return client


# =============================================================================
# Actions environment fixtures
# =============================================================================


@pytest.fixture
def output_file(tmp_path: Path) -> Path:
    path = tmp_path / "github_output"
    path.touch()
    return path


@pytest.fixture
def toolkit_env(workspace: Path, output_file: Path, task_definition_file: Path) -> dict[str, str]:
    return {
        "GITHUB_ACTIONS": "true",
        "GITHUB_WORKSPACE": str(workspace),
        "GITHUB_OUTPUT": str(output_file),
        "INPUT_TASK-DEFINITION": task_definition_file.name,
        "INPUT_COUNT": "2",
        "INPUT_SUBNETS": "subnet-a|subnet-b",
        "INPUT_SECURITY-GROUPS": "sg-1",
    }


@pytest.fixture
def toolkit(toolkit_env: dict[str, str]) -> ActionsToolkit:
    return ActionsToolkit(env=toolkit_env)


@pytest.fixture
def make_config(task_definition_file: Path, workspace: Path):
    """Factory for RunTaskConfig pointing at the workspace task definition."""

    def _make(**overrides: Any) -> RunTaskConfig:
        values: dict[str, Any] = {
            "task_definition": task_definition_file.name,
            "workspace": workspace,
            "count": 2,
            "subnets": "subnet-a|subnet-b",
            "security_groups": "sg-1",
            "cluster": "ci",
        }
        values.update(overrides)
        return RunTaskConfig(**values)

    return _make


# =============================================================================
# Logging isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo configure_logging() calls made by a test."""
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
