"""Tests for result models and score aggregation."""

import pytest

from probe_engine.models.result import CategoryCounts, compatibility_score


@pytest.mark.parametrize(
    ("total", "supported", "partial", "expected"),
    [
        (0, 0, 0, 0),
        (4, 4, 0, 100),
        (4, 2, 0, 50),
        (4, 2, 2, 75),
        (3, 1, 0, 33),
    ],
)
def test_compatibility_score(
    total: int, supported: int, partial: int, expected: int
) -> None:
    """Partial support counts as half of full support."""
    assert compatibility_score(total, supported, partial) == expected


def test_category_counts_tracks_statuses() -> None:
    """Adding statuses updates the total and the matching counter."""
    counts = CategoryCounts()

    counts.add("supported")
    counts.add("partial")
    counts.add("skipped")

    assert counts.total == 3
    assert counts.supported == 1
    assert counts.partial == 1
    assert counts.skipped == 1
    assert counts.score == 50
