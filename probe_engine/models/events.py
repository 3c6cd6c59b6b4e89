"""Event payloads published by the engine, one type per event name."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar, Literal

from probe_engine.models.result import RunResult, RunSummary

EventName = Literal[
    "run_start",
    "test_start",
    "test_complete",
    "run_complete",
    "run_error",
    "run_cancelled",
]


@dataclass(frozen=True, kw_only=True)
class RunStart:
    name: ClassVar[EventName] = "run_start"

    total_tests: int
    start_time_ms: float


@dataclass(frozen=True, kw_only=True)
class TestStart:
    """Published before every attempt of a test."""

    __test__ = False

    name: ClassVar[EventName] = "test_start"

    test_name: str
    description: str
    category: str
    attempt: int


@dataclass(frozen=True, kw_only=True)
class TestComplete:
    """Published once a test's result is stored, skips included."""

    __test__ = False

    name: ClassVar[EventName] = "test_complete"

    test_name: str
    result: RunResult
    progress: float


@dataclass(frozen=True, kw_only=True)
class RunComplete:
    name: ClassVar[EventName] = "run_complete"

    results: Sequence[RunResult]
    duration_ms: float
    summary: RunSummary


@dataclass(frozen=True, kw_only=True)
class RunError:
    name: ClassVar[EventName] = "run_error"

    error: Exception


@dataclass(frozen=True, kw_only=True)
class RunCancelled:
    name: ClassVar[EventName] = "run_cancelled"

    completed_tests: int
    duration_ms: float


EngineEvent = RunStart | TestStart | TestComplete | RunComplete | RunError | RunCancelled
