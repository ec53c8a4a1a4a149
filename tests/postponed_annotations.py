"""Functions whose annotations are only evaluated on demand."""

from __future__ import annotations

from tests.fixtures import Database


def consume_database(db: Database) -> None:
    pass


def consume_with_unknown_cache(db: Database, cache: UnknownCache) -> None:  # noqa: F821
    pass
