"""StepSequence — the ordered, append-only container of named steps."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    FrozenSet,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    Union,
)

from .errors import DuplicateNameError, InvalidStepError, UnknownDependencyError
from .observe import ObserveOptions, as_keys
from .steps import STEP_TYPES, ArgOrder, Invoke, Observe, Put, Step

if TYPE_CHECKING:
    from .outcome import Outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObserveKey:
    """Generated name for an observation added with :meth:`StepSequence.observe`."""

    position: int

    def __repr__(self) -> str:
        return f"<observe #{self.position}>"


@dataclass(frozen=True)
class StepSequence:
    """Immutable, ordered collection of uniquely named steps.

    Every mutation returns a new sequence and leaves the receiver untouched,
    so a partially built sequence can be branched into several pipelines::

        base = StepSequence().put("raw", payload).run("parsed", parse, ["raw"])
        to_db = base.run("saved", save, ["parsed"])
        to_api = base.run("sent", send, ["parsed"])

    Names are checked for uniqueness, and the keys an ``Invoke`` step selects
    must already be provided by earlier ``Put``/``Invoke`` steps.  Both checks
    happen in :meth:`append`, before anything runs.  Pass
    ``check_dependencies=False`` to skip the second one.
    """

    entries: Tuple[Tuple[Hashable, Step], ...] = ()
    claimed: FrozenSet[Hashable] = frozenset()
    check_dependencies: bool = True
    # Names whose steps produce a value (Observe steps do not)
    provided: FrozenSet[Hashable] = field(default=frozenset(), repr=False)

    @classmethod
    def new(cls, *, check_dependencies: bool = True) -> "StepSequence":
        return cls(check_dependencies=check_dependencies)

    # ------------------------------------------------------------------
    # Core primitive
    # ------------------------------------------------------------------

    def append(self, name: Hashable, step: Step) -> "StepSequence":
        """Return a new sequence with *step* added under *name*.

        Raises:
            DuplicateNameError: *name* is already used in this sequence.
            UnknownDependencyError: *step* selects a key no earlier step provides.
            InvalidStepError: *step* is not a Put, Invoke or Observe, or
                *name* is unhashable.
        """
        try:
            hash(name)
        except TypeError as exc:
            raise InvalidStepError(f"Step names must be hashable, got {name!r}") from exc

        if not isinstance(step, STEP_TYPES):
            raise InvalidStepError(
                f"Expected a Put, Invoke or Observe step for {name!r}, "
                f"got {type(step).__name__}"
            )

        if name in self.claimed:
            raise DuplicateNameError(name)

        if self.check_dependencies and isinstance(step, Invoke):
            for key in step.keys:
                if key not in self.provided:
                    raise UnknownDependencyError(name, key)

        logger.debug("Appending step %r (%s)", name, type(step).__name__)
        provided = self.provided
        if not isinstance(step, Observe):
            provided = provided | {name}

        return dataclasses.replace(
            self,
            entries=self.entries + ((name, step),),
            claimed=self.claimed | {name},
            provided=provided,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def to_list(self) -> List[Tuple[Hashable, Step]]:
        """Return ``(name, step)`` pairs in the order they were appended."""
        return list(self.entries)

    def names(self) -> List[Hashable]:
        """Return step names in the order they were appended."""
        return [name for name, _ in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Tuple[Hashable, Step]]:
        return iter(self.entries)

    def __contains__(self, name: object) -> bool:
        try:
            return name in self.claimed
        except TypeError:
            return False

    # ------------------------------------------------------------------
    # Fluent builder
    # ------------------------------------------------------------------

    def put(self, name: Hashable, value: Any) -> "StepSequence":
        """Add a precomputed *value* under *name*."""
        return self.append(name, Put(value))

    def run(
        self,
        name: Hashable,
        fn: Callable[..., Any],
        keys: Any = None,
        *,
        args: Iterable[Any] = (),
        order: Union[ArgOrder, str] = ArgOrder.PREPEND,
    ) -> "StepSequence":
        """Add a function call under *name*.

        Without *keys* (or with an empty list) *fn* receives every result so
        far, followed by *args*.  With *keys* it receives only those results
        as positional arguments, placed before *args* (``order="prepend"``)
        or after them (``order="append"``).  A single key such as ``"raw"``
        is the same as ``["raw"]``.

        *fn* must return :class:`~stepchain.results.Ok`,
        :class:`~stepchain.results.Halt` or :class:`~stepchain.results.Error`.
        """
        keys = as_keys(keys) if keys is not None else ()
        if keys:
            step = Invoke.selected(fn, keys, args, order)
        else:
            step = Invoke.full_state(fn, args)
        return self.append(name, step)

    def observe(
        self,
        only: Any = None,
        *,
        label: Optional[str] = None,
        width: Optional[int] = None,
    ) -> "StepSequence":
        """Add an observation of the results so far under a generated name."""
        options = ObserveOptions(only=only, label=label, width=width)
        return self.append(ObserveKey(len(self.entries)), Observe(options))

    def execute(self, **kwargs: Any) -> "Outcome":
        """Shortcut for :func:`stepchain.executor.execute`."""
        from .executor import execute

        return execute(self, **kwargs)
