"""Tests for probe return value normalization."""

from typing import Any

import pytest
from pydantic import ValidationError

from probe_engine.models.outcome import (
    BooleanOutcome,
    Outcome,
    RawOutcome,
    StructuredOutcome,
    classify,
    normalize,
)


@pytest.mark.parametrize(
    ("value", "status"),
    [
        (True, "supported"),
        (False, "unsupported"),
    ],
)
def test_booleans_map_to_supported_and_unsupported(value: bool, status: str) -> None:
    """Booleans become supported/unsupported with a generic details string."""
    outcome = normalize(value)

    assert outcome.status == status
    assert outcome.details == f"Test returned {value}"


def test_outcome_instance_passes_through_unchanged() -> None:
    """An Outcome returned by a probe is kept as is."""
    original = Outcome(status="partial", details="half there", score=50)

    assert normalize(original) is original


def test_mapping_with_status_is_validated_into_outcome() -> None:
    """Mappings with a status become an Outcome, keeping extra keys."""
    outcome = normalize({"status": "partial", "score": 40, "features": ["a"]})

    assert outcome.status == "partial"
    assert outcome.score == 40
    assert outcome.model_extra == {"features": ["a"]}


def test_mapping_with_unknown_status_is_rejected() -> None:
    """A status outside the known verdicts fails validation."""
    with pytest.raises(ValidationError):
        normalize({"status": "maybe"})


@pytest.mark.parametrize("value", [None, 42, "ok", {"vendor": "acme"}, [1, 2]])
def test_other_values_are_wrapped_as_supported(value: Any) -> None:
    """Anything else is supported, with the raw value as details."""
    outcome = normalize(value)

    assert outcome.status == "supported"
    assert outcome.details == value


def test_classify_returns_matching_variant() -> None:
    """Each kind of return value maps to its own variant."""
    assert isinstance(classify(True), BooleanOutcome)
    assert isinstance(classify(Outcome(status="error")), StructuredOutcome)
    assert isinstance(classify({"status": "skipped"}), StructuredOutcome)
    assert isinstance(classify(1), RawOutcome)


def test_score_must_be_a_percentage() -> None:
    """Scores outside 0..100 are rejected."""
    with pytest.raises(ValidationError):
        Outcome(status="partial", score=101)


def test_fractional_score_is_accepted() -> None:
    """Scores are percentages and may carry a fraction."""
    outcome = normalize({"status": "partial", "details": "2 of 3", "score": 66.7})

    assert outcome.status == "partial"
    assert outcome.score == 66.7
