from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for registration and resolution calls.

    ``THREAD`` makes first resolution of a service race-free when one container
    is shared between threads. ``NONE`` is for hosts that own the container from
    a single thread and want to skip lock overhead.
    """

    THREAD = "thread"
    """Guard every mutating or resolving call with one ``threading.RLock``."""

    NONE = "none"
    """Disable locking entirely."""
