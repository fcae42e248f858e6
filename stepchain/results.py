"""Tagged return values for step callables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Ok:
    """The step succeeded; store ``value`` and continue."""

    value: Any = None


@dataclass(frozen=True)
class Halt:
    """The step succeeded; store ``value`` and stop the run early."""

    value: Any = None


@dataclass(frozen=True)
class Error:
    """The step failed; stop the run and report ``value``."""

    value: Any = None


StepResult = Union[Ok, Halt, Error]


def ok(value: Any = None) -> Ok:
    return Ok(value)


def halt(value: Any = None) -> Halt:
    return Halt(value)


def error(value: Any = None) -> Error:
    return Error(value)


def is_step_result(obj: Any) -> bool:
    """Return True when *obj* is one of ``Ok``, ``Halt`` or ``Error``."""
    return isinstance(obj, (Ok, Halt, Error))
