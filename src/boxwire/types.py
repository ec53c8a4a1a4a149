from enum import Enum


class Lifetime(str, Enum):
    """Defines the lifetime of a registration in the container."""

    TRANSIENT = "component"
    """A new instance is created every time the component is requested."""

    SINGLETON = "service"
    """A single instance is created and shared for the lifetime of the container."""
