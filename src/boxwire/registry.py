from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from boxwire.service_key import ServiceKey
from boxwire.types import Lifetime


@dataclass(slots=True)
class Registration:
    """A single entry of the container: a factory, or a directly inserted instance.

    Direct instances have no factory and are always singletons.
    """

    service_key: ServiceKey
    factory: Callable[..., Any] | None = None
    lifetime: Lifetime = Lifetime.SINGLETON

    @property
    def is_service(self) -> bool:
        return self.lifetime is Lifetime.SINGLETON

    @property
    def is_component(self) -> bool:
        return self.lifetime is Lifetime.TRANSIENT

    @property
    def is_instance(self) -> bool:
        return self.factory is None
