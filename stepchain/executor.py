"""Executor — runs a StepSequence and folds results into an accumulator."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Hashable, Optional

from .config import ExecutorConfig
from .errors import StepContractError, UnknownDependencyError
from .observe import ObserveOptions, Presenter
from .outcome import Failed, Halted, Outcome, Success
from .results import Error, Halt, Ok
from .sequence import StepSequence
from .steps import Invoke, Observe, Put, Step

logger = logging.getLogger(__name__)


class Executor:
    """Run the steps of a :class:`StepSequence` in insertion order.

    Each call to :meth:`execute` starts from an empty accumulator that it
    owns, so one executor (and one sequence) can be used for any number of
    runs, including from several threads at once.  Steps only ever see a
    read-only snapshot of the accumulator.

    Args:
        config: Executor configuration (defaults to :class:`ExecutorConfig`).
        presenter: Overrides ``config.presenter`` for ``Observe`` steps.
    """

    def __init__(
        self,
        config: Optional[ExecutorConfig] = None,
        *,
        presenter: Optional[Presenter] = None,
    ) -> None:
        self.config = config or ExecutorConfig()
        self.presenter = presenter or self.config.presenter

    def execute(self, sequence: StepSequence) -> Outcome:
        """Run *sequence* to completion, halt or failure.

        Returns:
            ``Success`` with every result (``None`` for an empty sequence),
            ``Halted`` with the results up to and including the halting step,
            or ``Failed`` with the failing step's name, its error value and
            the results of the steps before it.

        Raises:
            StepContractError: A step returned something other than
                ``Ok``, ``Halt`` or ``Error``.
        """
        if not sequence.entries:
            logger.debug("Executing empty sequence")
            return Success(None)

        acc: Dict[Hashable, Any] = {}
        for name, step in sequence:
            if isinstance(step, Observe):
                self._observe(name, step.options, acc)
                continue

            result = self._apply(name, step, acc)

            if isinstance(result, Ok):
                acc[name] = result.value
                self._log_step(name, "ok", result.value)
            elif isinstance(result, Halt):
                acc[name] = result.value
                self._log_step(name, "halt", result.value)
                logger.info("Step %r halted the sequence after %d result(s)", name, len(acc))
                return Halted(acc)
            elif isinstance(result, Error):
                if self.config.log_values:
                    logger.warning("Step %r failed: %r", name, result.value)
                else:
                    logger.warning("Step %r failed", name)
                return Failed(name, result.value, acc)
            else:
                logger.error("Step %r returned a malformed value: %r", name, result)
                raise StepContractError(name, result)

        return Success(acc)

    # ------------------------------------------------------------------
    # Step kinds
    # ------------------------------------------------------------------

    def _apply(self, name: Hashable, step: Step, acc: Dict[Hashable, Any]) -> Any:
        if isinstance(step, Put):
            return Ok(step.value)

        if isinstance(step, Invoke):
            snapshot = MappingProxyType(dict(acc))
            try:
                args = step.build_args(snapshot)
            except KeyError as exc:
                # Only reachable when dependency checks were disabled at build time
                raise UnknownDependencyError(name, exc.args[0]) from exc
            return step.fn(*args)

        raise TypeError(f"Unsupported step type for {name!r}: {type(step).__name__}")

    def _observe(
        self, name: Hashable, options: ObserveOptions, acc: Dict[Hashable, Any]
    ) -> None:
        try:
            snapshot = options.select(MappingProxyType(dict(acc)))
            self.presenter(snapshot, options)
        except Exception as e:
            if not self.config.swallow_presenter_errors:
                raise
            logger.warning("Observe step %r presenter error (ignored): %s", name, e)

    def _log_step(self, name: Hashable, kind: str, value: Any) -> None:
        if self.config.log_values:
            logger.debug("Step %r -> %s(%r)", name, kind, value)
        else:
            logger.debug("Step %r -> %s", name, kind)


def execute(
    sequence: StepSequence,
    *,
    presenter: Optional[Presenter] = None,
    config: Optional[ExecutorConfig] = None,
) -> Outcome:
    """Execute *sequence* with a one-off :class:`Executor`."""
    return Executor(config, presenter=presenter).execute(sequence)
