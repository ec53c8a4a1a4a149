from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from boxwire.service_key import ServiceKey
    from boxwire.types import Lifetime


class BoxwireError(Exception):
    """Represent a base class for all boxwire-specific failures.

    Catch this type when you want to handle any boxwire error path without
    matching each concrete exception class individually.
    """


class BoxwireInvalidRegistrationError(BoxwireError):
    """Signal invalid registration arguments.

    Raised by ``Container.register`` and ``Container.override`` when the key is
    not a class or the factory is not callable, and by ``Container.insert``
    when ``provides`` does not match the instance.
    """


class BoxwireInvalidArgumentError(BoxwireError):
    """Signal a value that cannot be used where an object is required.

    Raised by ``Container.insert`` for ``None`` and plain builtin values, and by
    ``Container.configure`` when the callable does not declare exactly one
    parameter.
    """

    def __init__(self, value: Any, reason: str | None = None) -> None:
        self.value = value
        msg = reason or f"Unexpected argument type: {type(value).__name__}."
        super().__init__(msg)


class BoxwireDuplicateRegistrationError(BoxwireError):
    """Signal registration at an index that already has a factory or instance.

    Use ``Container.override`` or ``Container.insert(..., replace=True)`` to
    replace an existing definition on purpose.
    """

    def __init__(self, service_key: ServiceKey) -> None:
        self.service_key = service_key
        super().__init__(f"Duplicate service/component registration for {service_key}.")


class BoxwireConflictingKindError(BoxwireError):
    """Signal an override that would turn a service into a component or back."""

    def __init__(
        self,
        service_key: ServiceKey,
        existing: Lifetime,
        requested: Lifetime,
    ) -> None:
        self.service_key = service_key
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"Conflicting registration for {service_key}: "
            f"registered as {existing.value}, requested {requested.value}.",
        )


class BoxwireAlreadyInitializedError(BoxwireError):
    """Signal an override of a service whose instance was already constructed."""

    def __init__(self, service_key: ServiceKey) -> None:
        self.service_key = service_key
        super().__init__(f"Service {service_key} is already initialized and cannot be overridden.")


class BoxwireUndefinedDependencyError(BoxwireError):
    """Signal that neither the named nor the bare index has a factory or instance.

    Typical fix is registering the dependency before the first ``invoke`` or
    ``configure`` call that needs it, or declaring the parameter optional.
    """

    def __init__(self, service_key: ServiceKey) -> None:
        self.service_key = service_key
        super().__init__(f"Undefined service/component: {service_key}.")


class BoxwireWrongReturnTypeError(BoxwireError):
    """Signal that a factory produced a value of the wrong type."""

    def __init__(self, service_key: ServiceKey, expected: type, actual: type) -> None:
        self.service_key = service_key
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Factory function for {service_key} returned wrong type: "
            f"expected {expected.__qualname__}, got {actual.__qualname__}.",
        )


class BoxwireMissingTypeHintError(BoxwireError):
    """Signal a parameter that cannot be injected because it has no type hint."""

    def __init__(self, func: Callable[..., Any], parameter_name: str) -> None:
        self.func = func
        self.parameter_name = parameter_name
        func_name = getattr(func, "__qualname__", repr(func))
        super().__init__(f"Parameter '{parameter_name}' of {func_name} has no type hint.")


class BoxwireCyclicDependencyError(BoxwireError):
    """Signal a dependency graph that requires its own type while resolving it.

    Only raised by containers created with ``detect_cycles=True``; otherwise the
    recursion runs until Python raises ``RecursionError``.
    """

    def __init__(self, service_key: ServiceKey, stack: Sequence[ServiceKey]) -> None:
        self.service_key = service_key
        self.stack = list(stack)
        chain = " -> ".join(str(key) for key in (*self.stack, service_key))
        super().__init__(f"Circular dependency detected: {chain}.")
