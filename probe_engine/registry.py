"""Registry of test descriptors keyed by name."""

import logging
from collections.abc import Sequence

from probe_engine.models.descriptor import TestDescriptor

log = logging.getLogger(__name__)


class RegistrationError(Exception):
    """Raised when a test cannot be registered."""


class TestRegistry:
    """Holds test descriptors for the lifetime of an engine."""

    __test__ = False

    def __init__(self) -> None:
        self._tests: dict[str, TestDescriptor] = {}

    def __len__(self) -> int:
        return len(self._tests)

    def __contains__(self, name: object) -> bool:
        return name in self._tests

    def register(self, descriptor: TestDescriptor) -> None:
        """Store a descriptor, replacing any previous one with the same name.

        Raises:
            RegistrationError: If the name is empty or the probe is not callable

        """
        if not descriptor.name:
            raise RegistrationError("Test name must be a non-empty string")
        if not callable(descriptor.probe):
            raise RegistrationError(f"Probe for test '{descriptor.name}' is not callable")

        if descriptor.name in self._tests:
            log.info("Replacing registered test: %s", descriptor.name)
        self._tests[descriptor.name] = descriptor
        log.info("Registered test: %s (%s)", descriptor.name, descriptor.category)

    def get(self, name: str) -> TestDescriptor | None:
        return self._tests.get(name)

    def all_descriptors(self) -> Sequence[TestDescriptor]:
        return tuple(self._tests.values())

    def clear(self) -> None:
        self._tests.clear()
