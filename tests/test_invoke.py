"""Tests for Container.invoke() and Container.inject()."""

from typing import Optional

import pytest

from boxwire.container import Container
from boxwire.exceptions import (
    BoxwireMissingTypeHintError,
    BoxwireUndefinedDependencyError,
)
from boxwire.types import Lifetime
from tests.fixtures import Database, Finder, Mapper, make_mapper


class Cache:
    pass


class TestInvoke:
    def test_returns_function_result(self, container: Container) -> None:
        """invoke() returns whatever the function returns."""
        container.register(Database)

        def describe(db: Database) -> str:
            return type(db).__name__

        assert container.invoke(describe) == "Database"

    def test_no_parameters(self, container: Container) -> None:
        """Functions without parameters are simply called."""
        assert container.invoke(lambda: 42) == 42

    def test_missing_type_hint(self, container: Container) -> None:
        """Parameters without annotation cannot be injected."""
        container.register(Database)
        called: list[str] = []

        def consume(db: Database, cache) -> None:  # noqa: ANN001
            called.append("called")

        with pytest.raises(BoxwireMissingTypeHintError) as exc_info:
            container.invoke(consume)

        assert exc_info.value.parameter_name == "cache"
        assert called == []

    def test_unresolvable_forward_reference(self, container: Container) -> None:
        """A hint naming an unknown type counts as missing."""

        def consume(cache: "UnknownCache") -> None:  # type: ignore[name-defined]  # noqa: F821
            pass

        with pytest.raises(BoxwireMissingTypeHintError):
            container.invoke(consume)

    def test_required_undefined(self, container: Container) -> None:
        """Required parameters without registration fail the call."""

        def consume(cache: Cache) -> None:
            pass

        with pytest.raises(BoxwireUndefinedDependencyError):
            container.invoke(consume)

    def test_arguments_passed_in_order(self, container: Container) -> None:
        """Positional-only parameters receive their values in declaration order."""
        container.register(Database)
        container.register(Mapper, make_mapper)

        def consume(db: Database, mapper: Mapper, /) -> tuple[Database, Mapper]:
            return db, mapper

        db, mapper = container.invoke(consume)

        assert mapper.db is db

    def test_fresh_consumers_do_not_accumulate(self, container: Container) -> None:
        """Inspecting new closures on every call keeps no per-consumer state."""
        container.register(Database)
        container.register(Mapper, make_mapper)
        container.resolve(Mapper)
        cache = container._dependencies_extractor._parameters_cache
        cached_keys = set(cache)

        for _ in range(1000):

            def consume(db: Database) -> Database:
                return db

            container.invoke(consume)

        assert set(cache) == cached_keys

    def test_var_args_are_not_injected(self, container: Container) -> None:
        """*args and **kwargs are left alone."""
        container.register(Database)

        def consume(db: Database, *args: Cache, **kwargs: Cache) -> tuple[int, int]:
            return len(args), len(kwargs)

        assert container.invoke(consume) == (0, 0)


class TestOptionalParameters:
    def test_optional_unregistered_is_none(self, container: Container) -> None:
        """Optional parameters receive None and the function still runs."""
        ran: list[object] = []

        def consume(cache: Optional[Cache]) -> None:
            ran.append(cache)

        container.invoke(consume)

        assert ran == [None]

    def test_union_none_unregistered_is_none(self, container: Container) -> None:
        """`T | None` is optional too."""
        ran: list[object] = []

        def consume(cache: Cache | None, db: Database | None) -> None:
            ran.extend([cache, db])

        container.invoke(consume)

        assert ran == [None, None]

    def test_default_makes_parameter_optional(self, container: Container) -> None:
        """Parameters with a default are optional and receive None."""
        ran: list[object] = []

        def consume(cache: Cache = Cache()) -> None:  # noqa: B008
            ran.append(cache)

        container.invoke(consume)

        assert ran == [None]

    def test_optional_registered_is_resolved(self, container: Container) -> None:
        """Optional parameters are resolved when something is registered."""
        container.register(Cache)

        def consume(cache: Optional[Cache]) -> Optional[Cache]:
            return cache

        assert container.invoke(consume) is container.resolve(Cache)

    def test_optional_falls_back_to_bare(self, container: Container) -> None:
        """Optional lookups use the same named-to-bare fallback."""
        cache = Cache()
        container.insert(cache)

        def consume(local_cache: Optional[Cache]) -> Optional[Cache]:
            return local_cache

        assert container.invoke(consume) is cache

    def test_optional_does_not_hide_nested_failures(self, container: Container) -> None:
        """A registered optional dependency whose own dependencies are missing still fails."""
        container.register(Mapper, make_mapper)

        def consume(mapper: Optional[Mapper]) -> None:
            pass

        with pytest.raises(BoxwireUndefinedDependencyError):
            container.invoke(consume)


class TestExplicitArguments:
    def test_explicit_argument_skips_resolution(self, container: Container) -> None:
        """Explicit keyword arguments are passed through as given."""
        database = Database()

        def consume(db: Database) -> Database:
            return db

        assert container.invoke(consume, db=database) is database

    def test_explicit_argument_for_kwargs(self, container: Container) -> None:
        """Unknown explicit arguments reach a **kwargs catch-all."""

        def consume(**kwargs: object) -> dict[str, object]:
            return kwargs

        assert container.invoke(consume, flag=True) == {"flag": True}


class TestInject:
    def test_inject_wraps_function(self, container: Container) -> None:
        """Decorated functions resolve their parameters on every call."""
        container.register(Database)
        container.register(Finder, lifetime=Lifetime.TRANSIENT)

        @container.inject
        def find(finder: Finder) -> Finder:
            return finder

        first = find()
        second = find()

        assert first is not second
        assert first.db is second.db
        assert find.__name__ == "find"

    def test_inject_accepts_overrides(self, container: Container) -> None:
        """Keyword arguments override injection for the decorated function."""
        database = Database()

        @container.inject
        def consume(db: Database) -> Database:
            return db

        assert consume(db=database) is database
