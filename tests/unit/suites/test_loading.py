"""Tests for suite loading module."""

from unittest.mock import Mock, patch

import pytest

from probe_engine.suites.loading import (
    InvalidSuiteError,
    SuiteNotFoundError,
    available_suites,
    load_suite_manifest,
)
from probe_engine.suites.runtime import runtime_manifest


def test_load_suite_manifest_returns_manifest() -> None:
    """Loads suite manifest by key."""
    manifest = load_suite_manifest("runtime")

    assert manifest is runtime_manifest


def test_load_suite_manifest_raises_for_unknown_suite() -> None:
    """Raises SuiteNotFoundError for unknown suite key."""
    with pytest.raises(SuiteNotFoundError) as exc_info:
        load_suite_manifest("unknown-suite")

    assert "unknown-suite" in str(exc_info.value)
    assert "Available suites" in str(exc_info.value)


def test_available_suites_lists_installed_keys() -> None:
    """Installed suites are listed by key."""
    assert "runtime" in available_suites()


def test_load_suite_manifest_rejects_non_manifest() -> None:
    """An entry point resolving to something else is rejected."""
    entry = Mock(value="acme.suites:broken")
    entry.name = "broken"
    entry.load.return_value = object()

    with (
        patch("probe_engine.suites.loading.entry_points", return_value=[entry]),
        pytest.raises(InvalidSuiteError) as exc_info,
    ):
        load_suite_manifest("broken")

    assert "acme.suites:broken" in str(exc_info.value)
    assert "not SuiteManifest" in str(exc_info.value)
