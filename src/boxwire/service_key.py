from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from typing_extensions import Self

from boxwire.markers import extract_component


@dataclass(frozen=True, slots=True)
class ServiceKey:
    """Index of a registration: a type plus an optional component name.

    ``ServiceKey(Database)`` and ``ServiceKey(Database, "replica")`` are two
    distinct indexes. Lookups by the named key fall back to the bare key.
    """

    value: Any
    component: str | None = None

    @classmethod
    def from_value(cls, value: Any, component: str | None = None) -> Self:
        """Build a key from a class, an ``Annotated`` token, or another key.

        An explicit ``component`` takes precedence over one carried by ``value``.
        """
        if isinstance(value, ServiceKey):
            return cls(value.value, component if component is not None else value.component)

        inner, annotated_component = extract_component(value)
        return cls(inner, component if component is not None else annotated_component)

    @property
    def is_named(self) -> bool:
        return self.component is not None

    def bare(self) -> ServiceKey:
        """Return the unnamed key for the same type."""
        if self.component is None:
            return self
        return ServiceKey(self.value)

    def named(self, component: str | None) -> ServiceKey:
        return ServiceKey(self.value, component)

    def __str__(self) -> str:
        type_name = getattr(self.value, "__qualname__", repr(self.value))
        if self.component is None:
            return type_name
        return f"{type_name}[{self.component!r}]"
