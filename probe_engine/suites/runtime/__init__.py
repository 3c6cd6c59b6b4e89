"""Runtime capability suite."""

from probe_engine.suites.runtime.manifest import runtime_manifest
from probe_engine.suites.runtime.suite import RuntimeSuite

__all__ = ["RuntimeSuite", "runtime_manifest"]
