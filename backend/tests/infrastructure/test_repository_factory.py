"""Repository Factory — settings.storage_backend selects the implementation."""

from roster.config import Settings
from roster.infrastructure.memory_repository import InMemoryStudentRepository
from roster.infrastructure.mongo_repository import MongoStudentRepository
from roster.infrastructure.repositories import build_repository, close_repository
from roster.infrastructure.sql_repository import SqlStudentRepository


async def test_memory_is_the_default():
    repo = await build_repository(Settings(storage_backend="memory"))
    assert isinstance(repo, InMemoryStudentRepository)
    await close_repository(repo)


async def test_sql_backend_creates_tables():
    repo = await build_repository(Settings(
        storage_backend="sql", database_url="sqlite+aiosqlite:///:memory:",
    ))
    try:
        assert isinstance(repo, SqlStudentRepository)
        assert await repo.ping() is True
    finally:
        await close_repository(repo)


async def test_mongo_backend_builds_lazily():
    # Motor connects lazily, so no server is needed to construct the repository
    repo = await build_repository(Settings(
        storage_backend="mongo", mongodb_uri="mongodb://localhost:27017",
        mongodb_database="roster_test",
    ))
    assert isinstance(repo, MongoStudentRepository)
    assert repo.collection.name == "students"
    await close_repository(repo)


def test_postgres_url_is_rewritten_for_asyncpg():
    settings = Settings(database_url="postgresql://u:p@db:5432/roster")
    assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/roster"
