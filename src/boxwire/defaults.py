from typing import Any

from boxwire.lock_mode import LockMode
from boxwire.types import Lifetime

DEFAULT_NON_OBJECT_TYPES: tuple[type[Any], ...] = (
    int,
    str,
    bytes,
    float,
    complex,
    bool,
    list,
    dict,
    set,
    frozenset,
    tuple,
)
"""Builtin value types rejected by ``Container.insert``; they carry data, not behavior."""

DEFAULT_LIFETIME = Lifetime.SINGLETON

DEFAULT_LOCK_MODE = LockMode.THREAD

DEFAULT_DETECT_CYCLES = False
