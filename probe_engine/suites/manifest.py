"""Suite manifest definition for the plugin system."""

from collections.abc import Callable
from dataclasses import dataclass

from probe_engine.suites.base import ProbeSuite


@dataclass(frozen=True, kw_only=True)
class SuiteManifest:
    """Manifest describing a probe suite plugin.

    The suite itself is only built when the factory is called, so loading a
    manifest never runs suite setup code.
    """

    description: str
    suite_factory: Callable[[], ProbeSuite]
