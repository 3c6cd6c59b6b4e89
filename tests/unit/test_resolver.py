"""Tests for dependency resolution."""

from collections.abc import Sequence

import pytest

from probe_engine.models.descriptor import TestDescriptor
from probe_engine.resolver import CircularDependencyError, resolve


async def _probe() -> bool:
    return True


def _descriptor(
    name: str, priority: int = 1, dependencies: Sequence[str] = ()
) -> TestDescriptor:
    return TestDescriptor(
        name=name, probe=_probe, priority=priority, dependencies=tuple(dependencies)
    )


def _names(descriptors: Sequence[TestDescriptor]) -> list[str]:
    return [d.name for d in descriptors]


def test_empty_input() -> None:
    """Resolving nothing yields nothing."""
    assert resolve([]) == []


def test_orders_by_priority_descending() -> None:
    """Without dependencies, higher priority runs first."""
    ordered = resolve([_descriptor("a", 1), _descriptor("b", 5), _descriptor("c", 3)])

    assert _names(ordered) == ["b", "c", "a"]


def test_ties_keep_registration_order() -> None:
    """Equal priorities keep the order they were given in."""
    ordered = resolve([_descriptor("x"), _descriptor("y"), _descriptor("z")])

    assert _names(ordered) == ["x", "y", "z"]


def test_dependency_runs_before_higher_priority_dependent() -> None:
    """A low-priority dependency is pulled ahead of its dependent."""
    ordered = resolve(
        [
            _descriptor("base", priority=1),
            _descriptor("feature", priority=10, dependencies=["base"]),
            _descriptor("other", priority=5),
        ]
    )

    assert _names(ordered) == ["base", "feature", "other"]


def test_every_dependency_precedes_its_dependent() -> None:
    """Each dependency appears before every test that needs it."""
    descriptors = [
        _descriptor("webgl", 10),
        _descriptor("webgl2", 9, ["webgl"]),
        _descriptor("extensions", 7, ["webgl"]),
        _descriptor("performance", 6, ["webgl", "extensions"]),
        _descriptor("info", 8, ["webgl2"]),
    ]

    ordered = _names(resolve(descriptors))

    assert sorted(ordered) == sorted(d.name for d in descriptors)
    for descriptor in descriptors:
        for dependency in descriptor.dependencies:
            assert ordered.index(dependency) < ordered.index(descriptor.name)


def test_unknown_dependencies_are_ignored() -> None:
    """Dependencies that are not in the input do not affect ordering."""
    ordered = resolve([_descriptor("a", dependencies=["missing"])])

    assert _names(ordered) == ["a"]


def test_detects_two_node_cycle() -> None:
    """Mutual dependencies raise with the offending test named."""
    with pytest.raises(CircularDependencyError) as exc_info:
        resolve([_descriptor("a", dependencies=["b"]), _descriptor("b", dependencies=["a"])])

    assert exc_info.value.test_name == "a"
    assert exc_info.value.cycle == ("a", "b", "a")
    assert "Circular dependency detected: a -> b -> a" in str(exc_info.value)


def test_detects_self_dependency() -> None:
    """A test depending on itself is a cycle."""
    with pytest.raises(CircularDependencyError) as exc_info:
        resolve([_descriptor("a", dependencies=["a"])])

    assert exc_info.value.cycle == ("a", "a")


def test_detects_longer_cycle() -> None:
    """Cycles through several tests are reported along their path."""
    with pytest.raises(CircularDependencyError) as exc_info:
        resolve(
            [
                _descriptor("a", 3, ["b"]),
                _descriptor("b", 2, ["c"]),
                _descriptor("c", 1, ["a"]),
            ]
        )

    assert exc_info.value.cycle == ("a", "b", "c", "a")
