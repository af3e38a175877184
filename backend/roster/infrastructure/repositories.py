"""Repository Factory — builds the StudentRepository selected by settings.storage_backend.

Invariants:
    - Exactly one repository per application instance
    - SQL backend creates missing tables before first use

Design Decisions:
    - Imports of backend modules are local so the memory backend never loads
      database drivers
"""

import logging

from roster.config import Settings
from roster.core.domain_types import StorageBackend
from roster.core.repository_protocols import StudentRepository

logger = logging.getLogger(__name__)


async def build_repository(settings: Settings) -> StudentRepository:
    """Instantiate and prepare the configured backend."""
    backend = StorageBackend(settings.storage_backend)

    if backend is StorageBackend.SQL:
        from roster.infrastructure.database import DatabaseSessionManager
        from roster.infrastructure.sql_repository import SqlStudentRepository

        manager = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        await manager.create_all()
        repository = SqlStudentRepository(manager)
    elif backend is StorageBackend.MONGO:
        from roster.infrastructure.mongo_repository import MongoStudentRepository

        repository = MongoStudentRepository.from_uri(
            settings.mongodb_uri, settings.mongodb_database,
        )
    else:
        from roster.infrastructure.memory_repository import InMemoryStudentRepository

        repository = InMemoryStudentRepository()

    logger.info(
        "Student repository ready", extra={"backend": repository.backend_name},
    )
    return repository


async def close_repository(repository: StudentRepository) -> None:
    """Release connections held by the backend, if any."""
    close = getattr(repository, "close", None)
    if close is not None:
        await close()
