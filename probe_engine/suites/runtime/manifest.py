"""Runtime suite manifest."""

from probe_engine.suites.manifest import SuiteManifest
from probe_engine.suites.runtime.suite import RuntimeSuite

runtime_manifest = SuiteManifest(
    description="Optional capabilities of the Python runtime",
    suite_factory=RuntimeSuite,
)
