"""Configuration for the executor."""

from dataclasses import dataclass, field

from .observe import Presenter, rich_presenter


@dataclass
class ExecutorConfig:
    """Configuration for :class:`~stepchain.executor.Executor`.

    Attributes:
        presenter: Called as ``presenter(snapshot, options)`` by every
            ``Observe`` step (default: :func:`~stepchain.observe.rich_presenter`)
        log_values: Include the repr of step values and error values in logs (default: False)
        swallow_presenter_errors: Log and ignore exceptions raised by the
            presenter instead of propagating them (default: True)
    """

    presenter: Presenter = field(default=rich_presenter)
    log_values: bool = False
    swallow_presenter_errors: bool = True
