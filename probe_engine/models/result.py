"""Models for finalized test results and run summaries."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from probe_engine.models.outcome import Outcome, Status


def compatibility_score(total: int, supported: int, partial: int) -> int:
    """Percentage of full support, counting partial support as half."""
    if total == 0:
        return 0
    return round((supported + partial * 0.5) / total * 100)


@dataclass(frozen=True, kw_only=True)
class RunResult:
    """Final outcome of one test within a run."""

    test_name: str
    category: str
    outcome: Outcome
    duration_ms: float
    timestamp_ms: float
    attempts: int

    @property
    def status(self) -> Status:
        return self.outcome.status

    @property
    def details(self) -> Any:
        return self.outcome.details

    @property
    def score(self) -> float | None:
        return self.outcome.score


@dataclass(kw_only=True)
class CategoryCounts:
    """Per-status counts for one category."""

    total: int = 0
    supported: int = 0
    unsupported: int = 0
    partial: int = 0
    error: int = 0
    skipped: int = 0

    def add(self, status: Status) -> None:
        self.total += 1
        setattr(self, status, getattr(self, status) + 1)

    @property
    def score(self) -> int:
        return compatibility_score(self.total, self.supported, self.partial)


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Read-only view over the results of a run."""

    total_tests: int
    completed_tests: int
    categories: Mapping[str, CategoryCounts]
    status_counts: Mapping[Status, int]
    duration_ms: float
    results: Sequence[RunResult] = field(default_factory=tuple)

    @property
    def overall_score(self) -> int:
        return compatibility_score(
            self.completed_tests,
            self.status_counts.get("supported", 0),
            self.status_counts.get("partial", 0),
        )


@dataclass(frozen=True, kw_only=True)
class Progress:
    """Snapshot of an engine's progress through the current run."""

    completed: int
    total: int
    percentage: float
    current_test_name: str | None
    elapsed_ms: float
