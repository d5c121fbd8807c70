from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing_extensions import Self

from stackwire.cache import InstanceCache
from stackwire.lock_mode import LockMode
from stackwire.policies import RegistrationPolicy
from stackwire.providers import (
    Factory,
    Lifetime,
    ServiceDefinition,
    ServiceName,
    ServiceRegistry,
)
from stackwire.resolution_stack import active_resolution_stack
from stackwire.resolver import ResolutionEngine
from stackwire.settings import StackwireSettings
from stackwire.validators import GraphValidator, RegistrationValidator

logger = logging.getLogger(__name__)


class Container:
    """Composition root that owns a registry and a singleton cache.

    Register every service first, in any order, then resolve the root of the
    object graph:

    .. code-block:: python

        container = Container()
        container.register("logger", lifetime=Lifetime.SINGLETON, factory=Logger)
        container.register("database", lifetime=Lifetime.SINGLETON, factory=Database)
        container.register(
            "user_service",
            ["logger", "database"],
            Lifetime.SINGLETON,
            factory=UserService,
        )
        service = container.resolve("user_service")

    Containers are plain values: create one at the process entry point (or per
    test) and pass it to whatever needs it.
    """

    __slots__ = (
        "_cache",
        "_engine",
        "_graph_validator",
        "_lock_mode",
        "_registration_validator",
        "_registry",
    )

    def __init__(
        self,
        *,
        lock_mode: LockMode = LockMode.THREAD,
        registration_policy: RegistrationPolicy = RegistrationPolicy.REPLACE,
    ) -> None:
        """Create an empty container.

        Args:
            lock_mode: ``LockMode.THREAD`` guarantees one factory call per
                singleton under concurrent resolution; ``LockMode.NONE`` skips
                locking for single-threaded use.
            registration_policy: What happens when a name is registered twice.

        """
        self._lock_mode = LockMode(lock_mode)
        self._registry = ServiceRegistry(policy=RegistrationPolicy(registration_policy))
        self._cache = InstanceCache()
        self._engine = ResolutionEngine(self._registry, self._cache, lock_mode=self._lock_mode)
        self._registration_validator = RegistrationValidator()
        self._graph_validator = GraphValidator(self._registry)

    @classmethod
    def from_settings(cls, settings: StackwireSettings | None = None) -> Self:
        """Create a container configured from ``StackwireSettings``.

        When ``settings`` is omitted they are read from ``STACKWIRE_*``
        environment variables.
        """
        if settings is None:
            settings = StackwireSettings()
        return cls(
            lock_mode=settings.lock_mode,
            registration_policy=settings.registration_policy,
        )

    @property
    def lock_mode(self) -> LockMode:
        return self._lock_mode

    @property
    def registration_policy(self) -> RegistrationPolicy:
        return self._registry.policy

    def register(
        self,
        name: ServiceName,
        dependencies: Sequence[ServiceName] = (),
        lifetime: Lifetime | str = Lifetime.TRANSIENT,
        *,
        factory: Factory,
    ) -> None:
        """Register a service definition.

        Dependencies are not required to exist yet; they are looked up when the
        service is resolved.

        Re-registering a singleton that has already been constructed replaces
        its definition but keeps the cached instance: later ``resolve`` calls
        still return the old object, and a WARNING is logged.

        Args:
            name: Unique service name.
            dependencies: Names resolved in order and passed positionally to
                ``factory``.
            lifetime: ``Lifetime.SINGLETON`` (or ``"singleton"``) caches the
                first instance; ``Lifetime.TRANSIENT`` builds a new one each time.
            factory: Callable that builds the instance from its dependencies.

        Raises:
            InvalidRegistrationError: If any argument is malformed or the factory
                cannot accept the declared dependencies.
            DuplicateServiceError: If ``name`` is already registered under
                ``RegistrationPolicy.ERROR``.

        """
        validator = self._registration_validator
        name = validator.validate_name(name)
        normalized_dependencies = validator.validate_dependencies(name, dependencies)
        definition = ServiceDefinition(
            name=name,
            dependencies=normalized_dependencies,
            lifetime=validator.validate_lifetime(name, lifetime),
            factory=validator.validate_factory(name, factory, normalized_dependencies),
        )

        previous = self._registry.register(definition)
        self._engine.forget_checked_graph()
        logger.debug(
            "Registered service '%s' (lifetime=%s, dependencies=%s)",
            name,
            definition.lifetime.value,
            list(definition.dependencies),
        )
        if previous is not None and self._cache.contains(name):
            logger.warning(
                "Service '%s' was re-registered after its singleton was constructed; "
                "the cached instance is kept",
                name,
            )

    def resolve(self, name: ServiceName) -> Any:
        """Resolve and return the instance registered under ``name``.

        Construction recurses once per level of the dependency chain, so chains
        deeper than a few hundred services can hit the interpreter recursion
        limit. ``validate`` walks the graph iteratively and has no such limit.

        Raises:
            ServiceNotFoundError: If ``name`` or any nested dependency is not
                registered.
            CircularDependencyError: If the dependency graph revisits a service
                that is still being constructed.
            ConstructionFailureError: If a factory raised.

        """
        with active_resolution_stack(self._engine) as stack:
            return self._engine.resolve(name, stack)

    def validate(self, names: Sequence[ServiceName] | None = None) -> None:
        """Check the registered graph without calling any factory.

        Args:
            names: Root services to check. Defaults to every registered service.

        Raises:
            ServiceNotFoundError: If a reachable dependency is not registered.
            CircularDependencyError: If a reachable cycle exists.

        """
        self._graph_validator.validate(names)

    def __contains__(self, name: object) -> bool:
        return name in self._registry

    def __repr__(self) -> str:
        return (
            f"Container(services={len(self._registry)}, singletons={len(self._cache)}, "
            f"lock_mode={self._lock_mode.value})"
        )
