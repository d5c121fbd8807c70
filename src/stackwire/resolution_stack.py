from __future__ import annotations

import asyncio
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from stackwire.providers import ServiceName

# Stores (context_id, {owner: stack}) so each container keeps its own stack and a new
# thread or async task gets its own copy of the stacks
_resolution_stacks: ContextVar[
    tuple[tuple[int, int | None], dict[object, ResolutionStack]] | None
] = ContextVar(
    "stackwire_resolution_stacks",
    default=None,
)


class ResolutionStack:
    """Names currently being constructed, outermost first."""

    __slots__ = ("_names",)

    def __init__(self, names: Iterable[ServiceName] = ()) -> None:
        self._names: list[ServiceName] = list(names)

    def push(self, name: ServiceName) -> None:
        self._names.append(name)

    def pop(self) -> ServiceName:
        return self._names.pop()

    def cycle_path(self, name: ServiceName) -> tuple[ServiceName, ...]:
        """Return the chain that ends by revisiting ``name``."""
        return (*self._names, name)

    def copy(self) -> ResolutionStack:
        return ResolutionStack(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[ServiceName]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"ResolutionStack({self._names!r})"


def _get_context_id() -> tuple[int, int | None]:
    """Get an identifier for the current execution context.

    Combines the thread id with the id of the current async task, which is None
    outside of a running event loop.
    """
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    return threading.get_ident(), id(task) if task is not None else None


@contextmanager
def active_resolution_stack(owner: object) -> Iterator[ResolutionStack]:
    """Yield the resolution stack ``owner`` uses in the current thread or task.

    A top-level ``resolve`` call gets a fresh empty stack. A ``resolve`` call
    made from inside a factory on the same ``owner`` reuses the stack that is
    already active, so cycles that pass through nested calls are still
    detected. Other owners (other containers) always get their own stack. When
    a different thread or async task inherits the context, it gets a copy.
    """
    context_id = _get_context_id()
    stored = _resolution_stacks.get()

    token = None
    if stored is None:
        stacks: dict[object, ResolutionStack] = {}
        token = _resolution_stacks.set((context_id, stacks))
    else:
        owner_context_id, stacks = stored
        if owner_context_id != context_id:
            stacks = {key: stack.copy() for key, stack in stacks.items()}
            token = _resolution_stacks.set((context_id, stacks))

    stack = stacks.get(owner)
    created = stack is None
    if stack is None:
        stack = ResolutionStack()
        stacks[owner] = stack

    try:
        yield stack
    finally:
        if created:
            del stacks[owner]
        if token is not None:
            _resolution_stacks.reset(token)
