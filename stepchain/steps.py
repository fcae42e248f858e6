"""Step kinds — the closed set of things a sequence can hold.

``Put`` injects a precomputed value, ``Invoke`` calls a function and
``Observe`` hands the current results to a presenter without touching them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Hashable, Iterable, Mapping, Tuple, Union

from .errors import InvalidStepError
from .observe import ObserveOptions, as_keys, unhashable_keys


class ArgOrder(str, Enum):
    """Where an ``Invoke`` step puts its selected values relative to extra args."""

    PREPEND = "prepend"
    APPEND = "append"


@dataclass(frozen=True)
class Put:
    """Store ``value`` under the step's name without calling anything."""

    value: Any = None


@dataclass(frozen=True)
class Invoke:
    """Call ``fn`` and store what it returns.

    Build instances with :meth:`full_state` or :meth:`selected` rather than
    the constructor.  An empty ``keys`` tuple means *full state*: ``fn``
    receives the whole accumulator followed by ``extra_args``.  Otherwise
    ``fn`` receives the values of ``keys`` combined with ``extra_args``
    according to ``order``::

        PREPEND  ->  fn(*selected, *extra_args)
        APPEND   ->  fn(*extra_args, *selected)
    """

    fn: Callable[..., Any]
    keys: Tuple[Hashable, ...] = ()
    extra_args: Tuple[Any, ...] = ()
    order: ArgOrder = ArgOrder.PREPEND

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise InvalidStepError(
                f"Invoke expects a callable, got {type(self.fn).__name__}: {self.fn!r}"
            )
        # Coerce lists so equality and hashing behave
        object.__setattr__(self, "keys", tuple(self.keys))
        object.__setattr__(self, "extra_args", tuple(self.extra_args))
        object.__setattr__(self, "order", ArgOrder(self.order))
        bad = unhashable_keys(self.keys)
        if bad:
            raise InvalidStepError(f"Selected keys must be hashable, got {bad[0]!r}")

    @classmethod
    def full_state(
        cls, fn: Callable[..., Any], extra_args: Iterable[Any] = ()
    ) -> "Invoke":
        return cls(fn=fn, extra_args=tuple(extra_args))

    @classmethod
    def selected(
        cls,
        fn: Callable[..., Any],
        keys: Union[Hashable, Iterable[Hashable]],
        extra_args: Iterable[Any] = (),
        order: Union[ArgOrder, str] = ArgOrder.PREPEND,
    ) -> "Invoke":
        keys = as_keys(keys)
        if not keys:
            raise InvalidStepError(
                "Invoke.selected needs at least one key; use Invoke.full_state "
                "to receive every result"
            )
        return cls(fn=fn, keys=keys, extra_args=tuple(extra_args), order=ArgOrder(order))

    @property
    def is_full_state(self) -> bool:
        return not self.keys

    def build_args(self, acc: Mapping[Hashable, Any]) -> Tuple[Any, ...]:
        """Shape the positional arguments for ``fn`` from the accumulator."""
        if self.is_full_state:
            return (acc, *self.extra_args)

        selected = tuple(acc[key] for key in self.keys)
        if self.order is ArgOrder.APPEND:
            return self.extra_args + selected
        return selected + self.extra_args


@dataclass(frozen=True)
class Observe:
    """Show the results so far; never changes them or the control flow."""

    options: ObserveOptions = field(default_factory=ObserveOptions)


Step = Union[Put, Invoke, Observe]

STEP_TYPES = (Put, Invoke, Observe)
