"""Exceptions raised by the step-sequence engine.

Build-time problems (duplicate names, unknown dependencies, malformed steps)
are raised at the offending ``append`` call.  Business failures are *not*
exceptions — they come back as a :class:`~stepchain.outcome.Failed` value.
A step that returns something other than ``Ok`` / ``Halt`` / ``Error`` is a
wiring bug and raises :class:`StepContractError`, which deliberately does not
inherit from :class:`PipelineError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Hashable

if TYPE_CHECKING:
    from .outcome import Failed


class PipelineError(Exception):
    """Base class for the recoverable errors raised by this package."""


class PipelineBuildError(PipelineError, ValueError):
    """A step could not be appended to a sequence."""


class DuplicateNameError(PipelineBuildError):
    """The step name is already claimed by an earlier step."""

    def __init__(self, name: Hashable) -> None:
        self.name = name
        super().__init__(f"{name!r} is already a member of the sequence")


class UnknownDependencyError(PipelineBuildError):
    """A step selects a key that no earlier step provides."""

    def __init__(self, name: Hashable, key: Hashable) -> None:
        self.name = name
        self.key = key
        super().__init__(
            f"The parameter {key!r} does not exist in the sequence "
            f"(required by step {name!r})"
        )


class InvalidStepError(PipelineError, TypeError):
    """The object passed as a step (or step callable) is unusable."""


class StepFailedError(PipelineError):
    """Raised by :meth:`Failed.unwrap` to turn a failure into an exception."""

    def __init__(self, outcome: "Failed") -> None:
        self.outcome = outcome
        super().__init__(
            f"step {outcome.name!r} failed with {outcome.error!r}"
        )


class StepContractError(RuntimeError):
    """A step callable returned something other than Ok, Halt or Error."""

    def __init__(self, name: Hashable, value: Any) -> None:
        self.name = name
        self.value = value
        super().__init__(
            f"expected step `{name!r}` to return Ok(value), Halt(value) or "
            f"Error(value), got: {value!r}"
        )
