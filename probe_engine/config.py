"""Configuration for the test engine."""

from pydantic import Field

from probe_engine.models.base import Model


class EngineConfig(Model):
    """Engine-wide defaults and limits.

    ``parallel_tests`` is accepted for forward compatibility only; probes
    always run one at a time.
    """

    default_timeout_ms: int = Field(default=5000, gt=0)
    total_time_budget_ms: int = Field(default=60000, gt=0)
    default_max_retries: int = Field(default=1, ge=0)
    parallel_tests: int = Field(default=3, ge=1)
