"""Append-only store of run results."""

from collections.abc import Sequence

from probe_engine.models.outcome import STATUSES, Status
from probe_engine.models.result import CategoryCounts, RunResult, RunSummary


class DuplicateResultError(Exception):
    """Raised when a second result is stored for the same test in one run."""


class ResultStore:
    """Results of the current run, kept in completion order."""

    def __init__(self) -> None:
        self._results: dict[str, RunResult] = {}

    def __len__(self) -> int:
        return len(self._results)

    def put(self, name: str, result: RunResult) -> None:
        if name in self._results:
            raise DuplicateResultError(f"Result for test '{name}' already recorded")
        self._results[name] = result

    def get(self, name: str) -> RunResult | None:
        return self._results.get(name)

    def all(self) -> Sequence[tuple[str, RunResult]]:
        return tuple(self._results.items())

    def clear(self) -> None:
        self._results.clear()

    def summary(self, total_tests: int, duration_ms: float) -> RunSummary:
        """Aggregate the stored results into a fresh summary.

        Args:
            total_tests: Number of tests registered when the run started
            duration_ms: Time elapsed since the run started

        """
        categories: dict[str, CategoryCounts] = {}
        status_counts: dict[Status, int] = dict.fromkeys(STATUSES, 0)

        for result in self._results.values():
            categories.setdefault(result.category, CategoryCounts()).add(result.status)
            status_counts[result.status] += 1

        return RunSummary(
            total_tests=total_tests,
            completed_tests=len(self._results),
            categories=categories,
            status_counts=status_counts,
            duration_ms=duration_ms,
            results=tuple(self._results.values()),
        )
