from boxwire.container import Container
from boxwire.exceptions import (
    BoxwireAlreadyInitializedError,
    BoxwireConflictingKindError,
    BoxwireCyclicDependencyError,
    BoxwireDuplicateRegistrationError,
    BoxwireError,
    BoxwireInvalidArgumentError,
    BoxwireInvalidRegistrationError,
    BoxwireMissingTypeHintError,
    BoxwireUndefinedDependencyError,
    BoxwireWrongReturnTypeError,
)
from boxwire.lock_mode import LockMode
from boxwire.markers import Component
from boxwire.service_key import ServiceKey
from boxwire.types import Lifetime

__all__ = [
    "BoxwireAlreadyInitializedError",
    "BoxwireConflictingKindError",
    "BoxwireCyclicDependencyError",
    "BoxwireDuplicateRegistrationError",
    "BoxwireError",
    "BoxwireInvalidArgumentError",
    "BoxwireInvalidRegistrationError",
    "BoxwireMissingTypeHintError",
    "BoxwireUndefinedDependencyError",
    "BoxwireWrongReturnTypeError",
    "Component",
    "Container",
    "Lifetime",
    "LockMode",
    "ServiceKey",
]
