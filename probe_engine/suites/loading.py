"""Loading of probe suites from entry points."""

import logging
from importlib.metadata import entry_points

from probe_engine.suites.manifest import SuiteManifest

ENTRY_POINT_GROUP = "probe_engine.suites"

log = logging.getLogger(__name__)


class SuiteNotFoundError(Exception):
    """Raised when no entry point is registered under a suite key."""


class InvalidSuiteError(Exception):
    """Raised when a suite entry point does not resolve to a SuiteManifest."""


def available_suites() -> list[str]:
    """Keys of every installed suite, sorted."""
    return sorted(e.name for e in entry_points(group=ENTRY_POINT_GROUP))


def load_suite_manifest(key: str) -> SuiteManifest:
    """Load a suite manifest by key.

    Args:
        key: The suite key as registered in pyproject.toml (e.g., "runtime")

    Returns:
        The suite manifest instance

    Raises:
        SuiteNotFoundError: If no suite with the given key is installed
        InvalidSuiteError: If the entry point is not a SuiteManifest

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise SuiteNotFoundError(
            f"Suite '{key}' not found. Available suites: {available_suites()}"
        )

    entry = next(iter(matches))
    manifest = entry.load()
    if not isinstance(manifest, SuiteManifest):
        raise InvalidSuiteError(
            f"Suite '{key}' ({entry.value}) resolves to "
            f"{type(manifest).__name__}, not SuiteManifest"
        )

    log.info("Loaded suite %s: %s", key, manifest.description)
    return manifest
