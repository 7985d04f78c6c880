"""Host environment access for a GitHub Actions step.

``ActionsToolkit`` is the only place that knows how the runner passes inputs
(``INPUT_<NAME>`` environment variables), collects outputs (the
``GITHUB_OUTPUT`` file), and marks a step failed (an ``::error::`` command plus
a non-zero exit status). The rest of the package talks to it through
``get_input``, ``set_output`` and ``set_failed``.

Example::

    toolkit = ActionsToolkit()
    cluster = toolkit.get_input("cluster") or "default"
    toolkit.set_output("run-task-arn", ["arn:aws:ecs:...:task/abc"])
"""

from __future__ import annotations

import os
import sys
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TextIO

from ecs_runtask.actions.commands import format_command, to_command_value
from ecs_runtask.core.errors import ConfigError, MissingInputError


def input_env_name(name: str) -> str:
    """``task-definition`` → ``INPUT_TASK-DEFINITION`` (hyphens are kept)."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


class ActionsToolkit:
    """Inputs, outputs and status for the current step.

    Parameters
    ----------
    env
        Environment to read inputs from. Defaults to ``os.environ``.
    stream
        Where workflow commands are written. Defaults to ``sys.stdout``
        at call time.
    """

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.env = os.environ if env is None else env
        self._stream = stream
        self.exit_code = 0

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    # ── Inputs ───────────────────────────────────────────────────────────

    def get_input(self, name: str, *, required: bool = False, trim: bool = True) -> str:
        """Return the input value, or ``""`` when unset.

        Raises:
            MissingInputError: ``required`` and the input is empty.
        """
        value = self.env.get(input_env_name(name), "")
        if required and not value:
            raise MissingInputError(name)
        return value.strip() if trim else value

    @property
    def workspace(self) -> Path:
        """The checked-out repository root (``GITHUB_WORKSPACE``), else the cwd."""
        return Path(self.env.get("GITHUB_WORKSPACE") or os.getcwd())

    @property
    def is_actions(self) -> bool:
        return self.env.get("GITHUB_ACTIONS", "").lower() == "true"

    # ── Outputs ──────────────────────────────────────────────────────────

    def set_output(self, name: str, value: Any) -> None:
        """Publish a step output. Non-string values are written as JSON."""
        output_file = self.env.get("GITHUB_OUTPUT")
        if output_file:
            with open(output_file, "a", encoding="utf-8") as fh:
                fh.write(self._key_value_message(name, value))
            return
        self.issue_command("set-output", value, {"name": name})

    @staticmethod
    def _key_value_message(name: str, value: Any) -> str:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        converted = to_command_value(value)
        if delimiter in name or delimiter in converted:
            raise ConfigError(f"Unexpected input: output {name} contains the delimiter {delimiter}")
        return f"{name}<<{delimiter}\n{converted}\n{delimiter}\n"

    # ── Commands / status ────────────────────────────────────────────────

    def issue_command(
        self,
        command: str,
        message: Any = "",
        properties: dict[str, Any] | None = None,
    ) -> None:
        self.stream.write(format_command(command, message, properties) + "\n")
        self.stream.flush()

    def set_failed(self, message: str) -> None:
        """Report ``message`` as the step error and mark the step failed."""
        self.exit_code = 1
        self.issue_command("error", message)


__all__ = ["ActionsToolkit", "input_env_name"]
