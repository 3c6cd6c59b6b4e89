"""Priority-aware topological ordering of test descriptors."""

from collections.abc import Sequence

from probe_engine.models.descriptor import TestDescriptor


class CircularDependencyError(Exception):
    """Raised when test dependencies form a cycle."""

    def __init__(self, test_name: str, cycle: Sequence[str]) -> None:
        self.test_name = test_name
        self.cycle = tuple(cycle)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.cycle)}")


def resolve(descriptors: Sequence[TestDescriptor]) -> Sequence[TestDescriptor]:
    """Order descriptors so every dependency runs before its dependents.

    Tests are visited in descending priority (stable on ties), and each
    test's dependencies are pulled in ahead of it depth-first. Dependency
    names that are not among ``descriptors`` are skipped.

    Args:
        descriptors: Registered tests, in registration order

    Returns:
        Descriptors in execution order

    Raises:
        CircularDependencyError: If a test depends on itself, directly or not

    """
    by_name = {descriptor.name: descriptor for descriptor in descriptors}
    ordered: list[TestDescriptor] = []
    visited: set[str] = set()
    path: list[str] = []

    def visit(descriptor: TestDescriptor) -> None:
        if descriptor.name in visited:
            return
        if descriptor.name in path:
            cycle = path[path.index(descriptor.name) :] + [descriptor.name]
            raise CircularDependencyError(descriptor.name, cycle)

        path.append(descriptor.name)
        for dependency_name in descriptor.dependencies:
            if (dependency := by_name.get(dependency_name)) is not None:
                visit(dependency)
        path.pop()

        visited.add(descriptor.name)
        ordered.append(descriptor)

    for descriptor in sorted(descriptors, key=lambda d: d.priority, reverse=True):
        visit(descriptor)

    return ordered
