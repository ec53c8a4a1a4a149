from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from boxwire.exceptions import BoxwireCyclicDependencyError
from boxwire.service_key import ServiceKey

# Keys currently being constructed in this thread/context, outermost first.
_resolution_stack: ContextVar[tuple[ServiceKey, ...]] = ContextVar(
    "boxwire_resolution_stack",
    default=(),
)


def get_resolution_stack() -> tuple[ServiceKey, ...]:
    """Return the keys being resolved in the current context."""
    return _resolution_stack.get()


@contextmanager
def resolving(service_key: ServiceKey) -> Iterator[None]:
    """Push ``service_key`` for the duration of its construction.

    Raises:
        BoxwireCyclicDependencyError: If the key is already being constructed.

    """
    stack = get_resolution_stack()
    if service_key in stack:
        raise BoxwireCyclicDependencyError(service_key, stack)

    token = _resolution_stack.set((*stack, service_key))
    try:
        yield
    finally:
        _resolution_stack.reset(token)
