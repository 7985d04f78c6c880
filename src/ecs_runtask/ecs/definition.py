"""Task definition loading and cleaning.

A task definition file is usually the output of ``aws ecs
describe-task-definition`` committed to the repository. That output contains
attributes ECS generates (ARN, revision, status, registration metadata) and
often empty placeholders, both of which ``RegisterTaskDefinition`` rejects.
``clean_task_definition`` removes them and returns a new document; the input
is left untouched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from ecs_runtask.core.config import IGNORED_TASK_DEFINITION_ATTRIBUTES
from ecs_runtask.core.errors import ParseError
from ecs_runtask.core.logging import get_logger
from ecs_runtask.core.result import Result, try_result_with

logger = get_logger(__name__)

_EMPTY = object()


def is_empty(value: Any) -> bool:
    """True for None, ``""`` and containers holding only empty values.

    ``False`` and ``0`` are values.

    >>> is_empty({"a": [None, ""], "b": {}})
    True
    >>> is_empty({"essential": False})
    False
    """
    if value is None or value == "":
        return True
    if isinstance(value, Mapping):
        return all(is_empty(child) for child in value.values())
    if isinstance(value, (list, tuple)):
        return all(is_empty(element) for element in value)
    return False


def _prune(value: Any, ignored: frozenset[str]) -> Any:
    if isinstance(value, Mapping):
        pruned = {}
        for key, child in value.items():
            if key in ignored:
                continue
            child = _prune(child, ignored)
            if child is not _EMPTY:
                pruned[key] = child
        return pruned or _EMPTY
    if isinstance(value, (list, tuple)):
        items = [item for item in (_prune(element, ignored) for element in value) if item is not _EMPTY]
        return items or _EMPTY
    if value is None or value == "":
        return _EMPTY
    return value


def clean_task_definition(
    document: Mapping[str, Any],
    ignored: Iterable[str] = IGNORED_TASK_DEFINITION_ATTRIBUTES,
) -> dict[str, Any]:
    """Return a copy of ``document`` without empty values or ignored keys.

    Ignored keys are dropped at every depth, before emptiness is decided, so
    a mapping left empty by the removal is pruned as well. The result is
    stable under a second pass.

    >>> clean_task_definition({"family": "web", "revision": 3, "cpu": ""})
    {'family': 'web'}
    """
    cleaned = _prune(document, frozenset(ignored))
    return {} if cleaned is _EMPTY else cleaned


def resolve_definition_path(path: str | Path, workspace: str | Path) -> Path:
    """Absolute paths are kept; relative ones are joined to the workspace."""
    path = Path(path)
    return path if path.is_absolute() else Path(workspace) / path


def _read_document(path: Path) -> dict[str, Any]:
    document = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(document, Mapping):
        raise ParseError(
            f"Task definition file {path} must contain a mapping, "
            f"got {type(document).__name__}"
        ).with_context(path=str(path))
    return dict(document)


def load_task_definition(
    path: str | Path,
    workspace: str | Path,
    ignored: Iterable[str] = IGNORED_TASK_DEFINITION_ATTRIBUTES,
) -> Result[dict[str, Any]]:
    """Read, parse and clean a YAML or JSON task definition file.

    Returns:
        Ok with the cleaned document, or Err(ParseError) when the file cannot
        be read, is malformed, or is not a mapping.
    """
    resolved = resolve_definition_path(path, workspace)
    logger.debug(f"Loading task definition from {resolved}")

    def _to_parse_error(exc: Exception) -> Exception:
        if isinstance(exc, ParseError):
            return exc
        return ParseError(
            f"Failed to parse task definition file {resolved}: {exc}",
            cause=exc,
        ).with_context(path=str(resolved))

    ignored = frozenset(ignored)
    return try_result_with(
        lambda: _read_document(resolved),
        _to_parse_error,
        catch=(OSError, UnicodeDecodeError, yaml.YAMLError, ParseError),
    ).map(lambda document: clean_task_definition(document, ignored))


__all__ = [
    "is_empty",
    "clean_task_definition",
    "resolve_definition_path",
    "load_task_definition",
]
