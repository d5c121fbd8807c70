from __future__ import annotations

import threading
from typing import Any

from stackwire.providers import ServiceName


class InstanceCache:
    """Singleton instances keyed by service name.

    Each name is written at most once. ``lock_for`` hands out the per-name
    construction lock that keeps concurrent resolvers from building the same
    singleton twice.
    """

    def __init__(self) -> None:
        self._instances: dict[ServiceName, Any] = {}
        self._locks: dict[ServiceName, threading.Lock] = {}
        self._locks_lock = threading.Lock()

    def contains(self, name: ServiceName) -> bool:
        return name in self._instances

    def get(self, name: ServiceName) -> Any:
        """Return the cached instance, raising ``KeyError`` when absent."""
        return self._instances[name]

    def put(self, name: ServiceName, instance: Any) -> Any:
        """Cache ``instance`` unless the name is already cached.

        Returns the instance that ends up cached for ``name``.
        """
        return self._instances.setdefault(name, instance)

    def lock_for(self, name: ServiceName) -> threading.Lock:
        """Get or create the construction lock for ``name``.

        Uses double-checked locking to minimize lock contention.
        """
        lock = self._locks.get(name)
        if lock is None:
            with self._locks_lock:
                lock = self._locks.get(name)
                if lock is None:
                    lock = threading.Lock()
                    self._locks[name] = lock
        return lock

    def __len__(self) -> int:
        return len(self._instances)
