"""Sequential step pipelines that keep every intermediate result.

Public surface::

    from stepchain import (
        StepSequence,
        Put, Invoke, Observe, ArgOrder,
        Ok, Halt, Error,
        Executor, ExecutorConfig, execute,
        Success, Halted, Failed,
        ObserveOptions, rich_presenter,
        PipelineError, DuplicateNameError, UnknownDependencyError,
        InvalidStepError, StepFailedError, StepContractError,
    )

Example::

    outcome = (
        StepSequence()
        .put("a", 1)
        .put("b", 2)
        .run("sum", lambda a, b: Ok(a + b), ["a", "b"])
        .execute()
    )
    assert outcome == Success({"a": 1, "b": 2, "sum": 3})
"""

from .config import ExecutorConfig
from .errors import (
    DuplicateNameError,
    InvalidStepError,
    PipelineBuildError,
    PipelineError,
    StepContractError,
    StepFailedError,
    UnknownDependencyError,
)
from .executor import Executor, execute
from .observe import ObserveOptions, Presenter, rich_presenter
from .outcome import Failed, Halted, Outcome, Success
from .results import Error, Halt, Ok, StepResult, error, halt, is_step_result, ok
from .sequence import ObserveKey, StepSequence
from .steps import ArgOrder, Invoke, Observe, Put, Step

__all__ = [
    # Building
    "StepSequence",
    "ObserveKey",
    "Step",
    "Put",
    "Invoke",
    "Observe",
    "ArgOrder",
    # Step return values
    "Ok",
    "Halt",
    "Error",
    "StepResult",
    "ok",
    "halt",
    "error",
    "is_step_result",
    # Running
    "Executor",
    "ExecutorConfig",
    "execute",
    # Outcomes
    "Success",
    "Halted",
    "Failed",
    "Outcome",
    # Observation
    "ObserveOptions",
    "Presenter",
    "rich_presenter",
    # Errors
    "PipelineError",
    "PipelineBuildError",
    "DuplicateNameError",
    "UnknownDependencyError",
    "InvalidStepError",
    "StepFailedError",
    "StepContractError",
]
