"""Shared fixtures for stepchain tests."""

from __future__ import annotations

from typing import Any, Hashable, List, Mapping, Tuple

import pytest

from stepchain import ObserveOptions


class RecordingPresenter:
    """Presenter that keeps every snapshot it is shown."""

    def __init__(self) -> None:
        self.calls: List[Tuple[dict, ObserveOptions]] = []

    def __call__(self, snapshot: Mapping[Hashable, Any], options: ObserveOptions) -> None:
        self.calls.append((dict(snapshot), options))


class CallRecorder:
    """Step callable that records its positional arguments and returns a fixed result."""

    def __init__(self, result: Any) -> None:
        self.result = result
        self.calls: List[tuple] = []

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        return self.result


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def make_recorder():
    return CallRecorder
