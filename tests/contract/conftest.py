"""Fixtures for port contract tests: every backend behind one parametrized fixture."""

from collections.abc import Iterable

import pytest

from slotkeeper.adapters.id_generators import (
    SimpleIdGenerator,
    ULIDGenerator,
    UUIDv4Generator,
)
from slotkeeper.adapters.unit_of_work import InMemoryUnitOfWork, SqlAlchemyUnitOfWork
from slotkeeper.interfaces.id_generator import IdGenerator
from slotkeeper.interfaces.unit_of_work import AbstractUnitOfWork


@pytest.fixture(params=["memory", "sqlite", "postgres"])
def uow(request: pytest.FixtureRequest) -> AbstractUnitOfWork:
    """A fresh, empty unit of work for the requested backend.

    Supported params:
      - `"memory"` → InMemoryUnitOfWork
      - `"sqlite"` → SqlAlchemyUnitOfWork over in-memory SQLite
      - `"postgres"` → SqlAlchemyUnitOfWork over a Testcontainers Postgres
    """
    match request.param:
        case "memory":
            return InMemoryUnitOfWork()
        case "sqlite":
            return SqlAlchemyUnitOfWork(request.getfixturevalue("sqlite_engine_memory"))
        case "postgres":
            return SqlAlchemyUnitOfWork(request.getfixturevalue("postgres_engine"))
        case _:
            raise ValueError(f"unknown backend: {request.param}")


@pytest.fixture(params=["ulid", "uuid4", "simple"])
def id_generator(request: pytest.FixtureRequest) -> Iterable[IdGenerator]:
    """A fresh IdGenerator for the requested implementation."""
    match request.param:
        case "ulid":
            yield ULIDGenerator()
        case "uuid4":
            yield UUIDv4Generator()
        case "simple":
            yield SimpleIdGenerator()
        case _:
            raise ValueError(f"unknown id generator type: {request.param}")
