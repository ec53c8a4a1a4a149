from __future__ import annotations

import inspect
import types
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin, get_type_hints

from boxwire.exceptions import BoxwireMissingTypeHintError
from boxwire.markers import extract_component
from boxwire.service_key import ServiceKey

_SKIPPED_PARAMETER_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    """Information about an injectable function parameter."""

    name: str
    service_key: ServiceKey
    is_optional: bool
    is_positional_only: bool = False


class DependenciesExtractor:
    """Extract type-hinted parameters from factories and consumer functions.

    The parameter name doubles as the component name of the requested index,
    unless the hint carries an explicit ``Component`` marker.
    """

    def __init__(self) -> None:
        self._parameters_cache: dict[
            ServiceKey,
            tuple[Callable[..., Any], tuple[ParameterInfo, ...]],
        ] = {}

    def get_parameters(
        self,
        func: Callable[..., Any],
        service_key: ServiceKey | None = None,
    ) -> tuple[ParameterInfo, ...]:
        """Return the injectable parameters of ``func`` in declaration order.

        Results are cached per ``service_key`` for registered factories. Without
        a key, as for consumer functions, ``func`` is inspected on every call.

        Raises:
            BoxwireMissingTypeHintError: If a parameter has no resolvable type hint.

        """
        if service_key is not None:
            cached = self._parameters_cache.get(service_key)
            if cached is not None and cached[0] is func:
                return cached[1]

        signature = self.get_signature(func)
        type_hints = self._get_type_hints(func)

        result: list[ParameterInfo] = []
        for name, param in signature.parameters.items():
            if param.kind in _SKIPPED_PARAMETER_KINDS:
                continue
            annotation = type_hints.get(name, param.annotation)
            if annotation is inspect.Parameter.empty or isinstance(annotation, str):
                raise BoxwireMissingTypeHintError(func, name)

            dependency, component, is_optional = self._unwrap_annotation(annotation)
            if component is None:
                component = name
            result.append(
                ParameterInfo(
                    name=name,
                    service_key=ServiceKey(dependency, component),
                    is_optional=is_optional or param.default is not inspect.Parameter.empty,
                    is_positional_only=param.kind is inspect.Parameter.POSITIONAL_ONLY,
                ),
            )

        parameters = tuple(result)
        if service_key is not None:
            self._parameters_cache[service_key] = (func, parameters)
        return parameters

    def get_signature(self, func: Callable[..., Any]) -> inspect.Signature:
        try:
            return inspect.signature(func)
        except (ValueError, TypeError):
            # Builtins without introspectable signatures take no injected arguments.
            return inspect.Signature()

    def _get_type_hints(self, func: Callable[..., Any]) -> dict[str, Any]:
        hinted = self._get_hinted_func(func)
        try:
            return get_type_hints(hinted, include_extras=True)
        except (NameError, TypeError):
            # One unresolvable hint must not hide the others.
            return self._get_type_hints_by_parameter(hinted)

    def _get_type_hints_by_parameter(self, hinted: Any) -> dict[str, Any]:
        annotations = getattr(hinted, "__annotations__", None) or {}
        globalns = getattr(inspect.unwrap(hinted), "__globals__", {})

        hints: dict[str, Any] = {}
        for name, annotation in annotations.items():
            if isinstance(annotation, str):
                try:
                    annotation = eval(annotation, globalns)  # noqa: S307
                except (NameError, TypeError, SyntaxError):
                    continue
            hints[name] = annotation
        return hints

    def _get_hinted_func(self, func: Callable[..., Any]) -> Any:
        if isinstance(func, types.FunctionType | types.MethodType):
            return func
        if inspect.isclass(func):
            return func.__init__
        return getattr(type(func), "__call__", func)  # noqa: B004

    def _unwrap_annotation(self, annotation: Any) -> tuple[Any, str | None, bool]:
        annotation, component = extract_component(annotation)

        is_optional = False
        if get_origin(annotation) in (Union, types.UnionType):
            members = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(members) < len(get_args(annotation)):
                is_optional = True
                if len(members) == 1:
                    annotation = members[0]
                    if component is None:
                        annotation, component = extract_component(annotation)

        return annotation, component, is_optional
