"""Models for registered tests and their registration options."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import Field

from probe_engine.models.base import Model

Probe = Callable[[], Awaitable[Any] | Any]


class ProbeOptions(Model):
    """Optional per-test settings accepted at registration.

    Fields left as ``None`` fall back to the engine configuration.
    """

    category: str = Field(default="general", description="Reporting category")
    priority: int = Field(default=1, description="Higher runs earlier")
    timeout_ms: int | None = Field(
        default=None, gt=0, description="Per-attempt timeout in milliseconds"
    )
    max_retries: int | None = Field(
        default=None, ge=0, description="Retries after the first failed attempt"
    )
    dependencies: tuple[str, ...] = Field(
        default=(), description="Names of tests that must pass first"
    )
    description: str | None = Field(
        default=None, description="Human-readable description"
    )


@dataclass(frozen=True, kw_only=True)
class TestDescriptor:
    """A registered test: its probe plus the metadata the engine schedules on."""

    __test__ = False

    name: str
    probe: Probe
    category: str = "general"
    priority: int = 1
    timeout_ms: int = 5000
    max_retries: int = 1
    dependencies: tuple[str, ...] = ()
    description: str = ""


@dataclass(frozen=True, kw_only=True)
class ProbeDefinition:
    """A probe and its options, as supplied by a probe suite."""

    name: str
    probe: Probe
    options: ProbeOptions = field(default_factory=ProbeOptions)
