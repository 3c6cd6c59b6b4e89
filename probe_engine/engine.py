"""Sequential test engine with dependency ordering, retries and a time budget."""

import asyncio
import inspect
import logging
import time
from collections.abc import Sequence
from enum import StrEnum
from typing import Any, Self

from pydantic import ValidationError

from probe_engine.config import EngineConfig
from probe_engine.events import EventBus, Handler
from probe_engine.models.descriptor import Probe, ProbeOptions, TestDescriptor
from probe_engine.models.events import (
    EventName,
    RunCancelled,
    RunComplete,
    RunError,
    RunStart,
    TestComplete,
    TestStart,
)
from probe_engine.models.outcome import Outcome, normalize
from probe_engine.models.result import Progress, RunResult, RunSummary
from probe_engine.registry import RegistrationError, TestRegistry
from probe_engine.resolver import resolve
from probe_engine.results import ResultStore
from probe_engine.suites.base import ProbeSuite

log = logging.getLogger(__name__)

SKIP_TIME_BUDGET = "time budget exceeded"
SKIP_DEPENDENCY = "dependency not met"


class AlreadyRunningError(Exception):
    """Raised when a run is started while another one is active."""


class ProbeTimeoutError(TimeoutError):
    """Raised when a probe attempt does not finish within its timeout."""


class RunState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ERRORED = "errored"


def _elapsed_ms(since: float) -> float:
    return (time.monotonic() - since) * 1000


def _now_ms() -> float:
    return time.time() * 1000


class TestEngine:
    """Runs registered tests one at a time and reports through events.

    Tests are ordered by the dependency resolver, gated on the results of
    their dependencies, retried on failure and bulk-skipped once the run
    exceeds its time budget. Only one run may be active at a time.
    """

    __test__ = False

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self.events = EventBus()
        self._registry = TestRegistry()
        self._results = ResultStore()
        self._state = RunState.IDLE
        self._cancel_requested = False
        self._start_time: float | None = None
        self._total_tests = 0
        self._current_test: str | None = None

    @property
    def state(self) -> RunState:
        return self._state

    def register_test(self, name: str, probe: Probe, **options: Any) -> Self:
        """Register a test, replacing any test with the same name.

        Args:
            name: Unique test name
            probe: Callable returning a verdict, or an awaitable of one
            **options: Any ``ProbeOptions`` field

        Raises:
            RegistrationError: If the name, probe or options are invalid

        """
        try:
            probe_options = ProbeOptions(**options)
        except ValidationError as exc:
            raise RegistrationError(f"Invalid options for test '{name}': {exc}") from exc

        self._registry.register(self._build_descriptor(name, probe, probe_options))
        return self

    def register_suite(self, suite: ProbeSuite) -> Self:
        """Register every probe a suite provides."""
        for definition in suite.get_all_tests():
            self._registry.register(
                self._build_descriptor(definition.name, definition.probe, definition.options)
            )
        return self

    def _build_descriptor(
        self, name: str, probe: Probe, options: ProbeOptions
    ) -> TestDescriptor:
        if not isinstance(name, str):
            raise RegistrationError(f"Test name must be a string, got {type(name).__name__}")

        return TestDescriptor(
            name=name,
            probe=probe,
            category=options.category,
            priority=options.priority,
            timeout_ms=(
                options.timeout_ms
                if options.timeout_ms is not None
                else self.config.default_timeout_ms
            ),
            max_retries=(
                options.max_retries
                if options.max_retries is not None
                else self.config.default_max_retries
            ),
            dependencies=options.dependencies,
            description=options.description or name,
        )

    def on(self, event_name: EventName, handler: Handler) -> Self:
        self.events.on(event_name, handler)
        return self

    def off(self, event_name: EventName, handler: Handler) -> Self:
        self.events.off(event_name, handler)
        return self

    def is_running(self) -> bool:
        return self._state is RunState.RUNNING

    def get_result(self, name: str) -> RunResult | None:
        return self._results.get(name)

    def get_summary(self) -> RunSummary:
        return self._results.summary(self._total_tests, self._elapsed_since_start())

    def get_progress(self) -> Progress:
        completed = len(self._results)
        return Progress(
            completed=completed,
            total=self._total_tests,
            percentage=(
                completed / self._total_tests * 100 if self._total_tests > 0 else 0.0
            ),
            current_test_name=self._current_test,
            elapsed_ms=self._elapsed_since_start(),
        )

    def _elapsed_since_start(self) -> float:
        return _elapsed_ms(self._start_time) if self._start_time is not None else 0.0

    def cancel(self) -> None:
        """Stop the active run after the attempt in flight; no-op when idle."""
        if self._state is not RunState.RUNNING or self._cancel_requested:
            return
        self._cancel_requested = True
        log.info("Cancellation requested, stopping after the current test")

    def reset(self) -> None:
        """Cancel any active run and drop all registered tests and results.

        A run still finishing its in-flight attempt keeps writing into the
        result store it started with, so the engine is empty after reset.
        """
        self.cancel()
        self._registry.clear()
        self._results = ResultStore()
        self._total_tests = 0
        self._start_time = None
        self._current_test = None
        log.info("Test engine reset")

    async def run(self) -> RunSummary:
        """Run all registered tests and return the run summary.

        Raises:
            AlreadyRunningError: If a run is already active
            CircularDependencyError: If test dependencies form a cycle

        """
        if self._state is RunState.RUNNING:
            raise AlreadyRunningError("Tests are already running")

        self._state = RunState.RUNNING
        self._cancel_requested = False
        results = self._results
        results.clear()
        started = time.monotonic()
        total = len(self._registry)
        self._start_time = started
        self._total_tests = total

        log.info("Starting test run with %d test(s)", total)
        self.events.emit(RunStart(total_tests=total, start_time_ms=_now_ms()))

        try:
            ordered = resolve(self._registry.all_descriptors())
            cancelled = await self._run_sequence(ordered, results, started, total)
        except asyncio.CancelledError:
            self._state = RunState.CANCELLED
            log.info("Test run task cancelled after %d test(s)", len(results))
            self.events.emit(
                RunCancelled(
                    completed_tests=len(results), duration_ms=_elapsed_ms(started)
                )
            )
            raise
        except Exception as exc:
            self._state = RunState.ERRORED
            log.error("Test run failed: %s", exc)
            self.events.emit(RunError(error=exc))
            raise
        finally:
            self._current_test = None

        duration_ms = _elapsed_ms(started)
        summary = results.summary(total, duration_ms)

        if cancelled:
            self._state = RunState.CANCELLED
            log.info("Test run cancelled after %d test(s)", len(results))
            self.events.emit(
                RunCancelled(completed_tests=len(results), duration_ms=duration_ms)
            )
        else:
            self._state = RunState.COMPLETED
            log.info("Test run completed in %.0fms", duration_ms)
            self.events.emit(
                RunComplete(
                    results=tuple(result for _, result in results.all()),
                    duration_ms=duration_ms,
                    summary=summary,
                )
            )

        return summary

    async def _run_sequence(
        self,
        ordered: Sequence[TestDescriptor],
        results: ResultStore,
        started: float,
        total: int,
    ) -> bool:
        """Execute tests in order; returns whether the run was cancelled."""
        for index, descriptor in enumerate(ordered):
            if self._cancel_requested:
                return True

            if _elapsed_ms(started) > self.config.total_time_budget_ms:
                remaining = ordered[index:]
                log.warning(
                    "Time budget of %dms exceeded, skipping %d remaining test(s)",
                    self.config.total_time_budget_ms,
                    len(remaining),
                )
                for skipped in remaining:
                    self._record(results, _skipped(skipped, SKIP_TIME_BUDGET), total)
                break

            if unmet := _unmet_dependencies(descriptor, results):
                log.info(
                    "Skipping test %s, dependencies not met: %s",
                    descriptor.name,
                    ", ".join(unmet),
                )
                self._record(
                    results,
                    _skipped(descriptor, f"{SKIP_DEPENDENCY}: {', '.join(unmet)}"),
                    total,
                )
                continue

            self._record(results, await self._execute(descriptor), total)

        return self._cancel_requested

    def _record(self, results: ResultStore, result: RunResult, total: int) -> None:
        results.put(result.test_name, result)
        log.info(
            "Test %s: %s (%.0fms, %d attempt(s))",
            result.test_name,
            result.status,
            result.duration_ms,
            result.attempts,
        )
        self.events.emit(
            TestComplete(
                test_name=result.test_name,
                result=result,
                progress=len(results) / total,
            )
        )

    async def _execute(self, descriptor: TestDescriptor) -> RunResult:
        self._current_test = descriptor.name
        started = time.monotonic()
        attempts = 0

        while True:
            attempts += 1
            outcome = await self._attempt(descriptor, attempts)
            if outcome.status != "error":
                break
            if attempts > descriptor.max_retries or self._cancel_requested:
                break

        return RunResult(
            test_name=descriptor.name,
            category=descriptor.category,
            outcome=outcome,
            duration_ms=_elapsed_ms(started),
            timestamp_ms=_now_ms(),
            attempts=attempts,
        )

    async def _attempt(self, descriptor: TestDescriptor, attempt: int) -> Outcome:
        """Run one attempt; failures and timeouts become an error outcome."""
        self.events.emit(
            TestStart(
                test_name=descriptor.name,
                description=descriptor.description,
                category=descriptor.category,
                attempt=attempt,
            )
        )
        try:
            return normalize(await _call_with_timeout(descriptor))
        except asyncio.CancelledError as exc:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            log.warning(
                "Test %s raised CancelledError (attempt %d of %d)",
                descriptor.name,
                attempt,
                descriptor.max_retries + 1,
            )
            return Outcome(status="error", details=str(exc) or type(exc).__name__)
        except Exception as exc:
            log.warning(
                "Test %s failed (attempt %d of %d): %s",
                descriptor.name,
                attempt,
                descriptor.max_retries + 1,
                exc,
            )
            return Outcome(status="error", details=str(exc) or type(exc).__name__)


async def _call_with_timeout(descriptor: TestDescriptor) -> Any:
    """Invoke a probe, awaiting its result for at most ``timeout_ms``.

    On expiry the probe is cancelled. A value produced after the deadline,
    by a probe that suppressed its cancellation, is discarded.
    """
    scope = asyncio.timeout(descriptor.timeout_ms / 1000)
    try:
        async with scope:
            value = descriptor.probe()
            if inspect.isawaitable(value):
                value = await value
    except TimeoutError:
        if not scope.expired():
            raise
        raise ProbeTimeoutError(
            f"Test timeout after {descriptor.timeout_ms}ms"
        ) from None

    if scope.expired():
        raise ProbeTimeoutError(f"Test timeout after {descriptor.timeout_ms}ms")
    return value


def _unmet_dependencies(
    descriptor: TestDescriptor, results: ResultStore
) -> Sequence[str]:
    """Dependencies without a supported result, including ones never run."""
    return [
        name
        for name in descriptor.dependencies
        if (result := results.get(name)) is None or result.status != "supported"
    ]


def _skipped(descriptor: TestDescriptor, reason: str) -> RunResult:
    return RunResult(
        test_name=descriptor.name,
        category=descriptor.category,
        outcome=Outcome(status="skipped", details=reason),
        duration_ms=0.0,
        timestamp_ms=_now_ms(),
        attempts=0,
    )
