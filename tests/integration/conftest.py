"""Fixtures for tests that run SqlStore against a real PostgreSQL container."""
from collections.abc import AsyncGenerator, Generator

import docker
import pytest
from docker.errors import DockerException
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from models.base import Base
from services.store import SqlStore


def _docker_available() -> bool:
    try:
        docker.from_env().ping()
    except DockerException:
        return False
    return True


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer]:
    """Start a PostgreSQL container for the test session."""
    if not _docker_available():
        pytest.skip("Docker is not available")
    with PostgresContainer("postgres:16", driver="asyncpg") as postgres:
        yield postgres


@pytest.fixture
async def async_engine(postgres_container: PostgresContainer) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine with the schema in place."""
    import models  # noqa: F401

    engine = create_async_engine(postgres_container.get_connection_url(), echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def pg_connection(async_engine: AsyncEngine) -> AsyncGenerator[AsyncConnection]:
    """
    Create a connection with a transaction that will be rolled back after the test.

    Each test runs in its own transaction, so tests don't affect each other.
    """
    async with async_engine.connect() as connection:
        transaction = await connection.begin()
        try:
            yield connection
        finally:
            await transaction.rollback()


@pytest.fixture
async def pg_session(pg_connection: AsyncConnection) -> AsyncGenerator[AsyncSession]:
    """Create an async session bound to the test transaction, using savepoints."""
    session_factory = async_sessionmaker(
        bind=pg_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
def sql_store(pg_session: AsyncSession) -> SqlStore:
    """SqlStore bound to the rolled-back test session."""
    return SqlStore(pg_session)
