from typing import Annotated, Any, NamedTuple, get_args, get_origin

_ANNOTATED_MARKER_MIN_ARGS = 2


class Component(NamedTuple):
    """Name one of several registrations for the same base type.

    Attach ``Component`` metadata to ``typing.Annotated`` to register or request
    a named index explicitly instead of relying on the parameter name.

    Examples:
        .. code-block:: python

            from typing import Annotated, TypeAlias


            class Database: ...


            ReplicaDb: TypeAlias = Annotated[Database, Component("replica")]

            container.register(ReplicaDb, make_replica)


            def report(db: ReplicaDb) -> None: ...

    """

    value: str


def extract_component(annotation: Any) -> tuple[Any, str | None]:
    """Split ``Annotated[T, Component("x")]`` into ``(T, "x")``.

    Any other annotation is returned unchanged with ``None`` as the name.
    """
    if get_origin(annotation) is not Annotated:
        return annotation, None
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return annotation, None  # pragma: no cover - Annotated requires at least 2 args
    component = next(
        (item for item in annotation_args[1:] if isinstance(item, Component)),
        None,
    )
    return annotation_args[0], component.value if component is not None else None
