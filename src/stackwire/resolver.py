from __future__ import annotations

import logging
from typing import Any

from stackwire.cache import InstanceCache
from stackwire.exceptions import (
    CircularDependencyError,
    ConstructionFailureError,
    StackwireError,
)
from stackwire.lock_mode import LockMode
from stackwire.providers import ServiceDefinition, ServiceName, ServiceRegistry
from stackwire.resolution_stack import ResolutionStack
from stackwire.validators import GraphValidator

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Builds instance graphs depth-first from a registry.

    Dependencies are resolved left to right in declared order, so factories with
    observable side effects run in a deterministic sequence. The explicit
    ``ResolutionStack`` turns a cyclic graph into ``CircularDependencyError``
    instead of unbounded recursion.

    Under ``LockMode.THREAD`` the registered graph below a singleton is checked
    for cycles before its lock is taken, so two threads entering the same cycle
    from different ends fail instead of waiting on each other's locks.
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        cache: InstanceCache,
        *,
        lock_mode: LockMode = LockMode.THREAD,
    ) -> None:
        self._registry = registry
        self._cache = cache
        self._lock_mode = lock_mode
        self._graph_validator = GraphValidator(registry)
        self._acyclic: set[ServiceName] = set()

    def resolve(self, name: ServiceName, stack: ResolutionStack) -> Any:
        # Only singletons are ever cached, so a hit implies singleton scope.
        if self._cache.contains(name):
            return self._cache.get(name)

        if name in stack:
            raise CircularDependencyError(stack.cycle_path(name))

        definition = self._registry.lookup(name)
        if not definition.is_singleton:
            return self._construct(definition, stack)

        if self._lock_mode is LockMode.NONE:
            return self._cache.put(name, self._construct(definition, stack))

        self._ensure_acyclic(name, stack)
        with self._cache.lock_for(name):
            # Double-check: another thread may have finished while we waited.
            if self._cache.contains(name):
                return self._cache.get(name)
            instance = self._construct(definition, stack)
            return self._cache.put(name, instance)

    def forget_checked_graph(self) -> None:
        """Drop the names already proven acyclic; called when definitions change."""
        self._acyclic = set()

    def _ensure_acyclic(self, name: ServiceName, stack: ResolutionStack) -> None:
        if name in self._acyclic:
            return
        self._graph_validator.check_acyclic(
            name,
            path=list(stack),
            verified=self._acyclic,
            is_built=self._cache.contains,
        )

    def _construct(self, definition: ServiceDefinition, stack: ResolutionStack) -> Any:
        stack.push(definition.name)
        try:
            arguments = [self.resolve(dependency, stack) for dependency in definition.dependencies]
            try:
                instance = definition.factory(*arguments)
            except StackwireError:
                raise
            except Exception as exc:
                raise ConstructionFailureError(definition.name, exc) from exc
        finally:
            stack.pop()

        if definition.is_singleton:
            logger.debug("Constructed singleton '%s'", definition.name)
        return instance
