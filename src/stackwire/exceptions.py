from __future__ import annotations

from collections.abc import Sequence


class StackwireError(Exception):
    """Represent a base class for all stackwire-specific failures.

    Catch this type when you want to handle any stackwire error path without
    matching each concrete exception class individually.
    """


class InvalidRegistrationError(StackwireError):
    """Signal invalid registration arguments.

    Raised by ``Container.register`` and the registration helpers when the
    service name is empty or not a string, a dependency name is not a string,
    the lifetime is unknown, the factory is not callable, or the factory
    signature cannot accept the declared dependencies positionally.
    """


class DuplicateServiceError(InvalidRegistrationError):
    """Signal a second registration for a name under ``RegistrationPolicy.ERROR``.

    Typical fixes include removing the duplicate registration or switching the
    container to ``RegistrationPolicy.REPLACE``.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Service '{name}' is already registered.")


class ServiceNotFoundError(StackwireError):
    """Signal that a service name has no registered definition.

    Raised by ``Container.resolve`` for the requested name or for any nested
    dependency name, and by ``Container.validate``.

    Typical fix is registering the missing service before resolution. Dependency
    names are not checked at registration time, so registration order does not
    matter.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Service '{name}' is not registered.")


class CircularDependencyError(StackwireError):
    """Signal a cycle in the dependency graph.

    ``path`` lists the chain of names from the root request down to the
    repeated name, so ``A -> B -> C -> A`` is reported as ``("A", "B", "C", "A")``.
    """

    def __init__(self, path: Sequence[str]) -> None:
        self.path = tuple(path)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.path)}.")


class ConstructionFailureError(StackwireError):
    """Signal that a service factory raised.

    The original exception is kept unmodified in ``cause`` and chained as
    ``__cause__``. Construction is never retried and a failed singleton is not
    cached, so a later ``resolve`` call runs the factory again.
    """

    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        self.cause = cause
        super().__init__(
            f"Factory for service '{name}' failed: {type(cause).__name__}: {cause}",
        )
