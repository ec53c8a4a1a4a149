"""Domain classes shared by the container tests."""


class Database:
    pass


class Mapper:
    def __init__(self, db: Database) -> None:
        self.db = db


class Finder:
    def __init__(self, db: Database) -> None:
        self.db = db


class Counter:
    def __init__(self) -> None:
        self.count = 0


def make_mapper(db: Database) -> Mapper:
    return Mapper(db)


def make_finder(db: Database) -> Finder:
    return Finder(db)
