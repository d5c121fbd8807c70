from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from stackwire.container import Container
from stackwire.providers import Lifetime, ServiceName

FactoryF = TypeVar("FactoryF", bound=Callable[..., Any])


def provide(
    container: Container,
    name: ServiceName,
    *,
    dependencies: Sequence[ServiceName] = (),
    lifetime: Lifetime | str = Lifetime.TRANSIENT,
) -> Callable[[FactoryF], FactoryF]:
    """Register the decorated callable as the factory for ``name``.

    The decorated object is returned unchanged, so classes and functions stay
    usable outside the container.

    Examples:
        .. code-block:: python

            @provide(container, "user_service", dependencies=["logger", "database"])
            class UserService:
                def __init__(self, logger: Logger, database: Database) -> None: ...

    """

    def decorator(factory: FactoryF) -> FactoryF:
        container.register(name, dependencies, lifetime, factory=factory)
        return factory

    return decorator


def add_instance(container: Container, name: ServiceName, instance: Any) -> None:
    """Register an already-built object as a dependency-free singleton."""

    def _existing_instance() -> Any:
        return instance

    container.register(name, (), Lifetime.SINGLETON, factory=_existing_instance)
