"""GitHub Actions runner protocol: inputs, outputs, and workflow commands."""

from ecs_runtask.actions.commands import escape_data, escape_property, format_command
from ecs_runtask.actions.toolkit import ActionsToolkit, input_env_name

__all__ = [
    "ActionsToolkit",
    "input_env_name",
    "escape_data",
    "escape_property",
    "format_command",
]
