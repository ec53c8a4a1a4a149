from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from functools import wraps
from typing import Any, TypeVar, overload

from boxwire.defaults import (
    DEFAULT_DETECT_CYCLES,
    DEFAULT_LIFETIME,
    DEFAULT_LOCK_MODE,
    DEFAULT_NON_OBJECT_TYPES,
)
from boxwire.dependencies import DependenciesExtractor
from boxwire.exceptions import (
    BoxwireAlreadyInitializedError,
    BoxwireConflictingKindError,
    BoxwireDuplicateRegistrationError,
    BoxwireInvalidArgumentError,
    BoxwireInvalidRegistrationError,
    BoxwireUndefinedDependencyError,
    BoxwireWrongReturnTypeError,
)
from boxwire.lock_mode import LockMode
from boxwire.registry import Registration
from boxwire.resolution_stack import resolving
from boxwire.service_key import ServiceKey
from boxwire.types import Lifetime

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


class Container:
    """Registry that lazily builds and wires services and components.

    Factories are registered against a type, optionally with a component name.
    Their parameters, like those of functions passed to ``invoke``, are resolved
    from the container by type hint. The parameter name selects a named
    registration when one exists and falls back to the bare type otherwise.

    Services (``Lifetime.SINGLETON``) are built once and cached. Components
    (``Lifetime.TRANSIENT``) are built on every resolution. Once a service has
    been built it can no longer be overridden.
    """

    __slots__ = (
        "_configurators",
        "_default_lifetime",
        "_dependencies_extractor",
        "_detect_cycles",
        "_instances",
        "_lock",
        "_non_object_types",
        "_registry",
    )

    def __init__(
        self,
        *,
        default_lifetime: Lifetime = DEFAULT_LIFETIME,
        lock_mode: LockMode = DEFAULT_LOCK_MODE,
        detect_cycles: bool = DEFAULT_DETECT_CYCLES,
        non_object_types: tuple[type[Any], ...] = DEFAULT_NON_OBJECT_TYPES,
    ) -> None:
        """Initialize an empty container.

        Args:
            default_lifetime: Lifetime used by ``register``/``override`` calls that
                omit ``lifetime``.
            lock_mode: ``LockMode.THREAD`` serializes registration and resolution
                behind one re-entrant lock; ``LockMode.NONE`` skips locking.
            detect_cycles: Fail with ``BoxwireCyclicDependencyError`` when a
                factory transitively requires its own type. When disabled such
                graphs recurse until ``RecursionError``.
            non_object_types: Builtin value types that ``insert`` refuses.

        """
        self._default_lifetime = default_lifetime
        self._detect_cycles = detect_cycles
        self._non_object_types = non_object_types

        self._registry: dict[ServiceKey, Registration] = {}
        self._instances: dict[ServiceKey, Any] = {}
        self._configurators: dict[ServiceKey, list[Callable[[Any], Any]]] = {}
        self._dependencies_extractor = DependenciesExtractor()

        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if lock_mode is LockMode.THREAD else nullcontext()
        )

        self_key = ServiceKey(type(self))
        self._registry[self_key] = Registration(service_key=self_key)
        self._instances[self_key] = self

    def register(
        self,
        key: Any,
        factory: Callable[..., Any] | None = None,
        *,
        name: str | None = None,
        lifetime: Lifetime | None = None,
    ) -> None:
        """Register a service or component factory.

        Args:
            key: The class the factory produces, or an
                ``Annotated[cls, Component("name")]`` token.
            factory: Callable producing the instance. Its parameters are injected.
                Defaults to ``key`` itself.
            name: Optional component name; overrides a name carried by ``key``.
            lifetime: ``Lifetime.SINGLETON`` for a service, ``Lifetime.TRANSIENT``
                for a component. Defaults to the container's default lifetime.

        Raises:
            BoxwireDuplicateRegistrationError: If the index is already defined.
            BoxwireInvalidRegistrationError: If ``key`` is not a class or
                ``factory`` is not callable.

        Examples:
            .. code-block:: python

                def make_mapper(database: Database) -> Mapper:
                    return Mapper(database)


                container.register(Database, lambda: Database("sqlite://"))
                container.register(Mapper, make_mapper)
                container.register(Finder, lifetime=Lifetime.TRANSIENT)

        """
        registration = self._make_registration(key, factory, name=name, lifetime=lifetime)
        service_key = registration.service_key

        with self._lock:
            if service_key in self._registry:
                raise BoxwireDuplicateRegistrationError(service_key)
            self._registry[service_key] = registration

        logger.debug("Registered %s %s", registration.lifetime.value, service_key)

    def override(
        self,
        key: Any,
        factory: Callable[..., Any] | None = None,
        *,
        name: str | None = None,
        lifetime: Lifetime | None = None,
    ) -> None:
        """Register a factory, replacing any factory already registered for the index.

        Pending configuration functions of the index are kept.

        Raises:
            BoxwireConflictingKindError: If the existing registration has a
                different lifetime.
            BoxwireAlreadyInitializedError: If the existing registration is a
                service whose instance has already been built.
            BoxwireInvalidRegistrationError: If ``key`` is not a class or
                ``factory`` is not callable.

        """
        registration = self._make_registration(key, factory, name=name, lifetime=lifetime)
        service_key = registration.service_key

        with self._lock:
            existing = self._registry.get(service_key)
            if existing is not None:
                if existing.lifetime is not registration.lifetime:
                    raise BoxwireConflictingKindError(
                        service_key,
                        existing.lifetime,
                        registration.lifetime,
                    )
                if existing.is_service and service_key in self._instances:
                    raise BoxwireAlreadyInitializedError(service_key)
            self._registry[service_key] = registration

        logger.debug(
            "%s %s %s",
            "Overrode" if existing is not None else "Registered",
            registration.lifetime.value,
            service_key,
        )

    def insert(
        self,
        instance: object,
        *,
        name: str | None = None,
        replace: bool = False,
        provides: Any | None = None,
    ) -> None:
        """Register a pre-built instance as a service.

        Args:
            instance: The object to return on resolution.
            name: Optional component name.
            replace: Replace an existing service factory or instance at the
                index instead of failing.
            provides: Class to register the instance under. Defaults to
                ``type(instance)``.

        Raises:
            BoxwireInvalidArgumentError: If ``instance`` is ``None`` or a plain
                builtin value.
            BoxwireInvalidRegistrationError: If ``instance`` is not an instance
                of ``provides``.
            BoxwireDuplicateRegistrationError: If the index is defined and
                ``replace`` is false.
            BoxwireConflictingKindError: If ``replace`` is true and the index
                holds a component factory.

        """
        if instance is None or isinstance(instance, self._non_object_types):
            raise BoxwireInvalidArgumentError(instance)

        provided = provides if provides is not None else type(instance)
        service_key = ServiceKey.from_value(provided, name)
        if not inspect.isclass(service_key.value) or not isinstance(instance, service_key.value):
            instance_type = type(instance).__qualname__
            msg = f"Instance of {instance_type} cannot be registered as {service_key}."
            raise BoxwireInvalidRegistrationError(msg)

        with self._lock:
            existing = self._registry.get(service_key)
            if existing is not None:
                if not replace:
                    raise BoxwireDuplicateRegistrationError(service_key)
                if existing.is_component:
                    raise BoxwireConflictingKindError(
                        service_key,
                        existing.lifetime,
                        Lifetime.SINGLETON,
                    )

            self._registry[service_key] = Registration(service_key=service_key)
            self._instances[service_key] = instance
            logger.debug(
                "%s instance %s",
                "Replaced" if existing is not None else "Inserted",
                service_key,
            )
            self._dispatch_configuration(service_key, instance, is_singleton=True)

    def is_defined(self, key: Any, *, name: str | None = None) -> bool:
        """Return whether the exact index has a factory or an instance."""
        return ServiceKey.from_value(key, name) in self._registry

    def __contains__(self, key: Any) -> bool:
        return self.is_defined(key)

    @overload
    def resolve(self, key: type[T], *, name: str | None = None) -> T: ...

    @overload
    def resolve(self, key: Any, *, name: str | None = None) -> Any: ...

    def resolve(self, key: Any, *, name: str | None = None) -> Any:
        """Return the instance registered for ``key``, building it if needed.

        A named request uses the named registration when there is one and the
        bare registration for the same type otherwise.

        Raises:
            BoxwireUndefinedDependencyError: If nothing is registered for the key.
            BoxwireWrongReturnTypeError: If a factory returns a value of the
                wrong type.
            BoxwireCyclicDependencyError: If cycle detection is enabled and the
                key transitively depends on itself.

        """
        service_key = ServiceKey.from_value(key, name)
        with self._lock:
            return self._resolve(service_key)

    def invoke(self, func: Callable[..., R], /, **explicit: Any) -> R:
        """Call ``func`` with every parameter resolved from the container.

        Optional parameters (annotated ``T | None`` or with a default) receive
        ``None`` when nothing is registered for them. Keyword arguments in
        ``explicit`` are passed through as given instead of being resolved.

        Raises:
            BoxwireMissingTypeHintError: If a parameter has no type hint.
            BoxwireUndefinedDependencyError: If a required parameter cannot be
                resolved.

        Examples:
            .. code-block:: python

                def report(mapper: Mapper, cache: Cache | None) -> str: ...


                container.invoke(report)

        """
        with self._lock:
            args, kwargs = self._resolve_arguments(func, explicit)
        return func(*args, **kwargs)

    def inject(self, func: Callable[..., R]) -> Callable[..., R]:
        """Wrap ``func`` so that each call goes through ``invoke``.

        The wrapper accepts keyword arguments only; they override injection for
        the parameters they name.

        Examples:
            .. code-block:: python

                @container.inject
                def handle(mapper: Mapper) -> None: ...


                handle()

        """

        @wraps(func)
        def wrapper(**kwargs: Any) -> R:
            return self.invoke(func, **kwargs)

        return wrapper

    def configure(self, func: Callable[[Any], Any]) -> None:
        """Attach a post-construction function to the index its parameter names.

        The function runs against the service instance right away if it has been
        built already. Otherwise it runs, in the order configured, when the
        instance is built: once for a service, and on every build for a
        component. Configuration of a supertype also applies to instances of its
        subtypes built at the same component name.

        Raises:
            BoxwireInvalidArgumentError: If ``func`` does not declare exactly one
                parameter.
            BoxwireMissingTypeHintError: If the parameter has no type hint.
            BoxwireUndefinedDependencyError: If nothing is registered for the
                parameter's type.

        """
        msg = f"Configuration function must declare exactly one parameter: {func!r}."
        signature = self._dependencies_extractor.get_signature(func)
        if len(signature.parameters) != 1:
            raise BoxwireInvalidArgumentError(func, msg)
        parameters = self._dependencies_extractor.get_parameters(func)
        if len(parameters) != 1:
            raise BoxwireInvalidArgumentError(func, msg)

        requested_key = parameters[0].service_key
        with self._lock:
            registration = self._find_registration(requested_key)
            if registration is None:
                raise BoxwireUndefinedDependencyError(requested_key)

            service_key = registration.service_key
            if registration.is_service and service_key in self._instances:
                logger.debug("Configuring built service %s", service_key)
                func(self._instances[service_key])
                return

            self._configurators.setdefault(service_key, []).append(func)
            logger.debug("Queued configuration for %s", service_key)

    def _make_registration(
        self,
        key: Any,
        factory: Callable[..., Any] | None,
        *,
        name: str | None,
        lifetime: Lifetime | None,
    ) -> Registration:
        service_key = ServiceKey.from_value(key, name)
        if not inspect.isclass(service_key.value):
            msg = f"Registration key must be a class, got {service_key.value!r}."
            raise BoxwireInvalidRegistrationError(msg)

        resolved_factory = factory if factory is not None else service_key.value
        if not callable(resolved_factory):
            msg = f"Factory for {service_key} must be callable, got {resolved_factory!r}."
            raise BoxwireInvalidRegistrationError(msg)

        resolved_lifetime = lifetime if lifetime is not None else self._default_lifetime
        if not isinstance(resolved_lifetime, Lifetime):
            msg = f"Lifetime for {service_key} must be a Lifetime, got {resolved_lifetime!r}."
            raise BoxwireInvalidRegistrationError(msg)

        return Registration(
            service_key=service_key,
            factory=resolved_factory,
            lifetime=resolved_lifetime,
        )

    def _find_registration(self, service_key: ServiceKey) -> Registration | None:
        registration = self._registry.get(service_key)
        if registration is None and service_key.is_named:
            registration = self._registry.get(service_key.bare())
        return registration

    def _resolve(self, service_key: ServiceKey) -> Any:
        if service_key in self._instances:
            return self._instances[service_key]

        # A built bare service answers named requests only when no named entry exists.
        bare_key = service_key.bare()
        if service_key not in self._registry and bare_key in self._instances:
            return self._instances[bare_key]

        registration = self._find_registration(service_key)
        if registration is None:
            raise BoxwireUndefinedDependencyError(service_key)

        if self._detect_cycles:
            with resolving(registration.service_key):
                return self._build(registration)
        return self._build(registration)

    def _build(self, registration: Registration) -> Any:
        service_key = registration.service_key
        if registration.is_instance:  # pragma: no cover - instances are always cached
            return self._instances[service_key]

        factory: Callable[..., Any] = registration.factory  # type: ignore[assignment]
        args, kwargs = self._resolve_arguments(factory, {}, service_key)
        instance = factory(*args, **kwargs)

        expected = service_key.value
        if not isinstance(instance, expected):
            raise BoxwireWrongReturnTypeError(service_key, expected, type(instance))

        logger.debug("Built %s %s", registration.lifetime.value, service_key)
        self._dispatch_configuration(service_key, instance, is_singleton=registration.is_service)

        if registration.is_service:
            self._instances[service_key] = instance
        return instance

    def _resolve_arguments(
        self,
        func: Callable[..., Any],
        explicit: dict[str, Any],
        service_key: ServiceKey | None = None,
    ) -> tuple[list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        parameters = self._dependencies_extractor.get_parameters(func, service_key)
        for parameter in parameters:
            if parameter.name in explicit:
                value = explicit[parameter.name]
            elif parameter.is_optional and self._find_registration(parameter.service_key) is None:
                value = None
            else:
                value = self._resolve(parameter.service_key)

            if parameter.is_positional_only:
                args.append(value)
            else:
                kwargs[parameter.name] = value

        # Explicit arguments without a matching parameter go to a **kwargs catch-all.
        consumed = {parameter.name for parameter in parameters}
        kwargs.update((name, value) for name, value in explicit.items() if name not in consumed)
        return args, kwargs

    def _dispatch_configuration(
        self,
        service_key: ServiceKey,
        instance: Any,
        *,
        is_singleton: bool,
    ) -> None:
        hierarchy = list(type(instance).__mro__)
        if service_key.value not in hierarchy:
            # Virtual subclasses (ABC.register) are missing from the MRO.
            hierarchy.append(service_key.value)

        applied = 0
        for cls in hierarchy:
            configurator_key = ServiceKey(cls).named(service_key.component)
            configurators = self._configurators.get(configurator_key)
            if not configurators:
                continue
            logger.debug(
                "Applying %d configuration(s) of %s to %s",
                len(configurators),
                configurator_key,
                service_key,
            )
            count = self._apply_configurators(configurators, instance)
            if configurator_key == service_key:
                applied = count

        if is_singleton:
            # Functions queued by a configurator still apply to this instance.
            configurators = self._configurators.get(service_key, [])
            self._apply_configurators(configurators, instance, start=applied)
            self._configurators.pop(service_key, None)

    def _apply_configurators(
        self,
        configurators: list[Callable[[Any], Any]],
        instance: Any,
        *,
        start: int = 0,
    ) -> int:
        # The list may grow while it runs when a configurator calls configure().
        index = start
        while index < len(configurators):
            configurators[index](instance)
            index += 1
        return index
