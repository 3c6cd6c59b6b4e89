"""Abstract base class for probe suites."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from probe_engine.models.descriptor import ProbeDefinition


class ProbeSuite(ABC):
    """A named group of probes registered into an engine together."""

    @abstractmethod
    def get_all_tests(self) -> Sequence[ProbeDefinition]:
        """Return every probe of the suite with its registration options."""
