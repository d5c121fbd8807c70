from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator, Sequence
from typing import Any

from stackwire.exceptions import (
    CircularDependencyError,
    InvalidRegistrationError,
    ServiceNotFoundError,
)
from stackwire.providers import Factory, Lifetime, ServiceName, ServiceRegistry


class RegistrationValidator:
    """Validates registration arguments before creating service definitions."""

    def validate_name(self, name: object) -> ServiceName:
        if not isinstance(name, str) or not name:
            msg = f"Service name must be a non-empty string, got {name!r}."
            raise InvalidRegistrationError(msg)
        return name

    def validate_dependencies(
        self,
        name: ServiceName,
        dependencies: Sequence[ServiceName],
    ) -> tuple[ServiceName, ...]:
        if isinstance(dependencies, str):
            msg = (
                f"Dependencies of '{name}' must be a sequence of names, "
                f"got the string {dependencies!r}."
            )
            raise InvalidRegistrationError(msg)
        try:
            normalized = tuple(dependencies)
        except TypeError:
            msg = f"Dependencies of '{name}' must be a sequence of names, got {dependencies!r}."
            raise InvalidRegistrationError(msg) from None
        for dependency in normalized:
            if not isinstance(dependency, str) or not dependency:
                msg = f"Dependency names of '{name}' must be non-empty strings, got {dependency!r}."
                raise InvalidRegistrationError(msg)
        return normalized

    def validate_lifetime(self, name: ServiceName, lifetime: Lifetime | str) -> Lifetime:
        if isinstance(lifetime, Lifetime):
            return lifetime
        try:
            return Lifetime(lifetime)
        except ValueError:
            allowed = ", ".join(repr(member.value) for member in Lifetime)
            msg = f"Unknown lifetime {lifetime!r} for '{name}'; expected one of {allowed}."
            raise InvalidRegistrationError(msg) from None

    def validate_factory(
        self,
        name: ServiceName,
        factory: Any,
        dependencies: tuple[ServiceName, ...],
    ) -> Factory:
        """Check that ``factory`` can be called with one positional argument per dependency."""
        if not callable(factory):
            msg = f"Factory for '{name}' must be callable, got {factory!r}."
            raise InvalidRegistrationError(msg)

        try:
            signature = inspect.signature(factory)
        except (TypeError, ValueError):
            # Some builtins expose no signature; they are checked when called.
            return factory

        try:
            signature.bind(*dependencies)
        except TypeError as exc:
            msg = (
                f"Factory for '{name}' cannot accept its {len(dependencies)} declared "
                f"dependencies {list(dependencies)!r} positionally: {exc}."
            )
            raise InvalidRegistrationError(msg) from exc
        return factory


class GraphValidator:
    """Walks the registered dependency graph without constructing anything.

    The walk keeps its own explicit stack, so arbitrarily deep chains never hit
    the interpreter recursion limit.
    """

    def __init__(self, registry: ServiceRegistry) -> None:
        self._registry = registry

    def validate(self, names: Sequence[ServiceName] | None = None) -> None:
        """Raise the first missing registration or cycle reachable from ``names``.

        Validates every registered service when ``names`` is omitted.
        """
        roots = self._registry.names() if names is None else list(names)
        verified: set[ServiceName] = set()
        for root in roots:
            self._walk(root, (), verified, require_registered=True)

    def check_acyclic(
        self,
        name: ServiceName,
        *,
        path: Sequence[ServiceName],
        verified: set[ServiceName],
        is_built: Callable[[ServiceName], bool],
    ) -> None:
        """Raise ``CircularDependencyError`` if ``name`` can reach itself or ``path``.

        Names for which ``is_built`` is true are leaves. The walk stops quietly at
        the first unregistered name, where resolution itself would fail first.
        Names proven acyclic are added to ``verified`` and skipped next time.
        """
        self._walk(name, path, verified, require_registered=False, is_built=is_built)

    def _walk(
        self,
        root: ServiceName,
        path: Sequence[ServiceName],
        verified: set[ServiceName],
        *,
        require_registered: bool,
        is_built: Callable[[ServiceName], bool] | None = None,
    ) -> None:
        trail = list(path)
        on_trail = set(trail)
        pending: list[Iterator[ServiceName]] = []
        name = root
        while True:
            if name in on_trail:
                raise CircularDependencyError([*trail, name])
            if name not in verified and not (is_built is not None and is_built(name)):
                definition = self._registry.find(name)
                if definition is not None:
                    trail.append(name)
                    on_trail.add(name)
                    pending.append(iter(definition.dependencies))
                elif require_registered:
                    raise ServiceNotFoundError(name)
                else:
                    # Resolution stops here with ServiceNotFoundError first.
                    return

            while pending:
                dependency = next(pending[-1], None)
                if dependency is not None:
                    name = dependency
                    break
                pending.pop()
                finished = trail.pop()
                on_trail.discard(finished)
                verified.add(finished)
            else:
                return
