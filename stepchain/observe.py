"""Observation options and the default presenter for ``Observe`` steps."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Hashable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from rich.console import Console
from rich.pretty import Pretty
from rich.text import Text

logger = logging.getLogger(__name__)

Presenter = Callable[[Mapping[Hashable, Any], "ObserveOptions"], None]


def as_keys(value: Any) -> Tuple[Any, ...]:
    """Wrap a single key as a 1-tuple; turn a list, tuple or set of keys into a tuple.

    Strings are single keys, never sequences of characters.
    """
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return (value,)


def unhashable_keys(keys: Tuple[Any, ...]) -> List[Any]:
    bad = []
    for key in keys:
        try:
            hash(key)
        except TypeError:
            bad.append(key)
    return bad


class ObserveOptions(BaseModel):
    """Presentation options carried by an ``Observe`` step.

    ``only`` accepts a single key or a list/tuple/set of keys and is always
    stored as a tuple.  ``None`` shows the whole accumulator.  Unhashable keys
    are rejected when the options are built.
    """

    model_config = ConfigDict(frozen=True)

    only: Optional[Tuple[Any, ...]] = Field(
        default=None, description="Keys to show; None shows every result"
    )
    label: Optional[str] = Field(
        default=None, description="Printed before the observed mapping"
    )
    width: Optional[int] = Field(
        default=None, gt=0, description="Console width for the default presenter"
    )

    @field_validator("only", mode="before")
    @classmethod
    def _wrap_only(cls, value: Any) -> Any:
        if value is None:
            return None
        keys = as_keys(value)
        bad = unhashable_keys(keys)
        if bad:
            raise ValueError(f"observed keys must be hashable, got {bad[0]!r}")
        return keys

    def select(self, snapshot: Mapping[Hashable, Any]) -> Mapping[Hashable, Any]:
        """Return the part of *snapshot* these options ask for.

        Keys listed in ``only`` that have no result yet are skipped.
        """
        if self.only is None:
            return snapshot
        return MappingProxyType(
            {key: snapshot[key] for key in self.only if key in snapshot}
        )


def rich_presenter(
    snapshot: Mapping[Hashable, Any], options: ObserveOptions
) -> None:
    """Pretty-print an accumulator snapshot to stdout."""
    console = Console(width=options.width) if options.width else Console()
    rendered = Pretty(dict(snapshot))
    if options.label:
        console.print(Text(f"{options.label}:"), rendered)
    else:
        console.print(rendered)
    logger.debug("Observed %d result(s)", len(snapshot))
