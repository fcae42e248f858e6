"""Outcomes of executing a step sequence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional, Union

from .errors import StepFailedError


@dataclass(frozen=True)
class Success:
    """Every step ran.

    ``value`` holds every result by step name, or ``None`` when the sequence
    had no steps at all.
    """

    value: Optional[Dict[Hashable, Any]]

    ok = True
    halted = False

    def unwrap(self) -> Optional[Dict[Hashable, Any]]:
        return self.value


@dataclass(frozen=True)
class Halted:
    """A step returned ``Halt``; its value is included, later steps never ran."""

    value: Dict[Hashable, Any]

    ok = True
    halted = True

    def unwrap(self) -> Dict[Hashable, Any]:
        return self.value


@dataclass(frozen=True)
class Failed:
    """A step returned ``Error``.

    ``context`` holds the results of the steps that ran *before* ``name``;
    the failing step's own value is only available as ``error``.
    """

    name: Hashable
    error: Any
    context: Dict[Hashable, Any] = field(default_factory=dict)

    ok = False
    halted = False

    @property
    def value(self) -> Dict[Hashable, Any]:
        return self.context

    def unwrap(self) -> Dict[Hashable, Any]:
        raise StepFailedError(self)


Outcome = Union[Success, Halted, Failed]
