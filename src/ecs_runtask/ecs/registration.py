"""Task definition registration."""

from __future__ import annotations

import json
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ecs_runtask.core.errors import RegistrationError
from ecs_runtask.core.logging import get_logger
from ecs_runtask.core.result import Err, Ok, Result

logger = get_logger(__name__)


def register_task_definition(client: Any, document: dict[str, Any]) -> Result[str]:
    """Register ``document`` and return the new revision's ARN.

    On failure the submitted document is written to the debug log; the error
    message itself only carries the reason ECS gave.
    """
    logger.debug("Registering the task definition")
    try:
        response = client.register_task_definition(**document)
    except (ClientError, BotoCoreError) as exc:
        logger.debug("Task definition contents:")
        logger.debug(json.dumps(document, indent=4, default=str))
        return Err(
            RegistrationError(
                f"Failed to register task definition in ECS: {exc}",
                cause=exc,
            ).with_context(family=document.get("family"))
        )

    arn = response["taskDefinition"]["taskDefinitionArn"]
    logger.debug(f"Registered task definition {arn}")
    return Ok(arn)


__all__ = ["register_task_definition"]
