"""Result model for a run.

``RunReport`` records what a run did: the state it reached, every state it
passed through, the ARNs it created, and the final container outcomes. The
workflow fills it in as it goes and calls ``mark_complete()`` once, the way
deployment results are finalized.

Key Concepts:
    RunState: Enum of the run-level state machine. ``SUCCEEDED`` and
        ``FAILED`` are terminal.
    RunReport: Pydantic model; ``model_dump_json()`` backs ``--json``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class RunState(str, Enum):
    """Run-level state machine."""

    IDLE = "IDLE"
    REGISTERING = "REGISTERING"
    REGISTERED = "REGISTERED"
    LAUNCHING = "LAUNCHING"
    LAUNCHED = "LAUNCHED"
    WAITING = "WAITING"
    STOPPED = "STOPPED"
    EVALUATING = "EVALUATING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.SUCCEEDED, RunState.FAILED)


# Allowed forward moves; FAILED is reachable from any non-terminal state
TRANSITIONS: dict[RunState, frozenset[RunState]] = {
    RunState.IDLE: frozenset({RunState.REGISTERING}),
    RunState.REGISTERING: frozenset({RunState.REGISTERED}),
    RunState.REGISTERED: frozenset({RunState.LAUNCHING}),
    RunState.LAUNCHING: frozenset({RunState.LAUNCHED}),
    RunState.LAUNCHED: frozenset({RunState.WAITING, RunState.SUCCEEDED}),
    RunState.WAITING: frozenset({RunState.STOPPED}),
    RunState.STOPPED: frozenset({RunState.EVALUATING}),
    RunState.EVALUATING: frozenset({RunState.SUCCEEDED}),
    RunState.SUCCEEDED: frozenset(),
    RunState.FAILED: frozenset(),
}


class ContainerResult(BaseModel):
    name: str | None = None
    exit_code: int | None = None
    reason: str | None = None


class TaskResult(BaseModel):
    task_arn: str
    stopped_reason: str | None = None
    containers: list[ContainerResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(container.exit_code == 0 for container in self.containers)


class RunReport(BaseModel):
    """Outcome of one invocation."""

    run_id: str
    cluster: str
    state: RunState = RunState.IDLE
    history: list[RunState] = Field(default_factory=lambda: [RunState.IDLE])
    task_definition_arn: str | None = None
    task_arns: list[str] = Field(default_factory=list)
    console_url: str | None = None
    waited: bool = False
    tasks: list[TaskResult] = Field(default_factory=list)
    error: str | None = None
    error_detail: dict[str, Any] | None = None
    started_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    completed_at: str | None = None
    duration_seconds: float = 0.0

    def transition(self, new_state: RunState) -> None:
        """Move to ``new_state``.

        Raises:
            ValueError: The move is not part of the state machine.
        """
        allowed = TRANSITIONS[self.state]
        if new_state is RunState.FAILED and not self.state.is_terminal:
            allowed = allowed | {RunState.FAILED}
        if new_state not in allowed:
            raise ValueError(f"Invalid run transition {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.SUCCEEDED

    def mark_complete(self) -> None:
        """Finalize timestamps and duration."""
        self.completed_at = datetime.now(UTC).isoformat()
        start = datetime.fromisoformat(self.started_at)
        end = datetime.fromisoformat(self.completed_at)
        self.duration_seconds = (end - start).total_seconds()


__all__ = [
    "RunState",
    "TRANSITIONS",
    "ContainerResult",
    "TaskResult",
    "RunReport",
]
