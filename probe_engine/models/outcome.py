"""Models for probe outcomes and normalization of probe return values."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import ConfigDict, Field

from probe_engine.models.base import Model

Status = Literal["supported", "unsupported", "partial", "error", "skipped"]

STATUSES: tuple[Status, ...] = (
    "supported",
    "unsupported",
    "partial",
    "error",
    "skipped",
)


class Outcome(Model):
    """Normalized result of one probe attempt.

    Extra fields returned by a probe are kept so structured outcomes pass
    through unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    status: Status = Field(..., description="Verdict of the attempt")
    details: Any = Field(default=None, description="Free-form diagnostic payload")
    score: float | None = Field(
        default=None, ge=0, le=100, description="Partial-credit score (0-100)"
    )


@dataclass(frozen=True, kw_only=True)
class BooleanOutcome:
    """Probe returned a plain boolean."""

    value: bool

    def to_outcome(self) -> Outcome:
        return Outcome(
            status="supported" if self.value else "unsupported",
            details=f"Test returned {self.value}",
        )


@dataclass(frozen=True, kw_only=True)
class StructuredOutcome:
    """Probe returned something already shaped like an outcome."""

    outcome: Outcome

    def to_outcome(self) -> Outcome:
        return self.outcome


@dataclass(frozen=True, kw_only=True)
class RawOutcome:
    """Probe returned an arbitrary value, treated as supported."""

    value: Any

    def to_outcome(self) -> Outcome:
        return Outcome(status="supported", details=self.value)


ProbeReturn = BooleanOutcome | StructuredOutcome | RawOutcome


def classify(value: Any) -> ProbeReturn:
    """Sort a probe's resolved value into one of the three return variants.

    Mappings carrying a ``status`` key are validated into an Outcome, so an
    unknown status raises ``pydantic.ValidationError``.
    """
    if isinstance(value, bool):
        return BooleanOutcome(value=value)
    if isinstance(value, Outcome):
        return StructuredOutcome(outcome=value)
    if isinstance(value, Mapping) and "status" in value:
        return StructuredOutcome(outcome=Outcome.model_validate(dict(value)))
    return RawOutcome(value=value)


def normalize(value: Any) -> Outcome:
    """Convert a probe's resolved value into the canonical Outcome."""
    return classify(value).to_outcome()
