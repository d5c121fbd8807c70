from __future__ import annotations

from enum import Enum


class LockMode(str, Enum):
    """Select locking behavior for singleton construction.

    Use ``THREAD`` when singletons may be resolved from several threads. Use
    ``NONE`` for strictly single-threaded bootstrap code.
    """

    THREAD = "thread"
    """Guard each singleton's construction with its own ``threading.Lock``."""

    NONE = "none"
    """Disable locking around cache reads/writes."""
