from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

from stackwire.exceptions import DuplicateServiceError, ServiceNotFoundError
from stackwire.policies import RegistrationPolicy

ServiceName: TypeAlias = str
"""A unique key that identifies a service in the container."""

Factory: TypeAlias = Callable[..., Any]
"""A callable that receives resolved dependency instances positionally and returns an instance."""


class Lifetime(Enum):
    """Defines the lifetime of a service in the container."""

    TRANSIENT = "transient"
    """A new instance is created every time the service is requested."""

    SINGLETON = "singleton"
    """A single instance is created and shared for the lifetime of the container."""


@dataclass(frozen=True, slots=True)
class ServiceDefinition:
    """A declarative recipe for one named service."""

    name: ServiceName
    """The unique key this definition is registered under."""
    dependencies: tuple[ServiceName, ...]
    """Names resolved in order and passed positionally to ``factory``."""
    lifetime: Lifetime
    """Whether instances are cached for the container's lifetime."""
    factory: Factory
    """The construction recipe."""

    @property
    def is_singleton(self) -> bool:
        return self.lifetime is Lifetime.SINGLETON


class ServiceRegistry:
    """Holds all service definitions registered in the container."""

    def __init__(self, *, policy: RegistrationPolicy = RegistrationPolicy.REPLACE) -> None:
        self._policy = policy
        self._definitions: dict[ServiceName, ServiceDefinition] = {}
        self._lock = threading.Lock()

    @property
    def policy(self) -> RegistrationPolicy:
        return self._policy

    def register(self, definition: ServiceDefinition) -> ServiceDefinition | None:
        """Store a definition and return the one it replaced, if any."""
        with self._lock:
            previous = self._definitions.get(definition.name)
            if previous is not None and self._policy is RegistrationPolicy.ERROR:
                raise DuplicateServiceError(definition.name)
            self._definitions[definition.name] = definition
            return previous

    def lookup(self, name: ServiceName) -> ServiceDefinition:
        """Get a definition by name or raise ``ServiceNotFoundError``."""
        definition = self._definitions.get(name)
        if definition is None:
            raise ServiceNotFoundError(name)
        return definition

    def find(self, name: ServiceName) -> ServiceDefinition | None:
        """Get a definition by name, if it exists."""
        return self._definitions.get(name)

    def names(self) -> list[ServiceName]:
        """Get all registered names in registration order."""
        with self._lock:
            return list(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
