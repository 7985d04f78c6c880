"""Workflow command formatting for the GitHub Actions runner.

The runner scans a step's stdout for lines of the form
``::command key=value,key=value::message``. Messages and property values are
percent-escaped so a multi-line payload (a JSON document, a traceback) stays on
one line.
"""

from __future__ import annotations

import json
from typing import Any


def to_command_value(value: Any) -> str:
    """Render ``value`` the way the runner expects: strings as-is, rest as JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def escape_data(value: Any) -> str:
    return (
        to_command_value(value)
        .replace("%", "%25")
        .replace("\r", "%0D")
        .replace("\n", "%0A")
    )


def escape_property(value: Any) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_command(
    command: str,
    message: Any = "",
    properties: dict[str, Any] | None = None,
) -> str:
    """Build a single workflow command line.

    >>> format_command("debug", "a\\nb")
    '::debug::a%0Ab'
    >>> format_command("set-output", "x", {"name": "count"})
    '::set-output name=count::x'
    """
    line = f"::{command}"
    if properties:
        props = ",".join(
            f"{key}={escape_property(val)}"
            for key, val in properties.items()
            if val is not None
        )
        if props:
            line += f" {props}"
    return f"{line}::{escape_data(message)}"


__all__ = ["to_command_value", "escape_data", "escape_property", "format_command"]
