"""ECS client construction and console links."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from ecs_runtask.core.config import AGENT
from ecs_runtask.core.logging import get_logger

logger = get_logger(__name__)

CHINA_REGION_PREFIX = "cn"
CONSOLE_HOSTNAME = "console.aws.amazon.com"
CHINA_CONSOLE_HOSTNAME = "console.amazonaws.cn"


def create_ecs_client(region: str | None = None, user_agent: str = AGENT) -> Any:
    """Create a boto3 ECS client tagged with the action's user agent.

    Credentials and, when ``region`` is None, the region come from the
    standard AWS environment chain.
    """
    client_kwargs: dict[str, Any] = {
        "service_name": "ecs",
        "config": Config(user_agent_extra=user_agent),
    }
    if region:
        client_kwargs["region_name"] = region

    client = boto3.client(**client_kwargs)
    logger.debug("ecs_client_initialized", region=client.meta.region_name)
    return client


def client_region(client: Any) -> str:
    return client.meta.region_name or ""


def console_hostname(region: str) -> str:
    """China partition regions use their own console domain."""
    if region.startswith(CHINA_REGION_PREFIX):
        return CHINA_CONSOLE_HOSTNAME
    return CONSOLE_HOSTNAME


def console_url(region: str, cluster: str) -> str:
    """Link to the cluster's task list in the ECS console."""
    return (
        f"https://{console_hostname(region)}/ecs/home"
        f"?region={region}#/clusters/{cluster}/tasks"
    )


__all__ = [
    "create_ecs_client",
    "client_region",
    "console_hostname",
    "console_url",
]
