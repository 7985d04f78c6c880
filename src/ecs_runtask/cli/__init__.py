"""ecs-runtask CLI (Typer)."""

from ecs_runtask.cli.app import app

__all__ = ["app"]
