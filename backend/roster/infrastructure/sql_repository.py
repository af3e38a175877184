"""SQL Student Repository — SQLAlchemy async implementation of StudentRepository.

Invariants:
    - One session per operation; writes commit before returning
    - Returned StudentRecords are detached snapshots with UTC-aware timestamps
    - list() orders by created_at ascending, ties broken by id
    - SQLAlchemy failures surface as DatabaseError via DatabaseSessionManager

Design Decisions:
    - Session manager injected (not imported as a singleton): tests hand in an
      in-memory SQLite manager
    - SQLite drops tzinfo on DateTime(timezone=True); _as_utc restores it
"""

from datetime import datetime, timezone

from sqlalchemy import func, select

from roster.core.domain_types import StudentId
from roster.core.student import NormalizedStudent, StudentRecord, next_updated_at
from roster.infrastructure.database import DatabaseSessionManager
from roster.models.student import Student as StudentModel


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_record(row: StudentModel) -> StudentRecord:
    return StudentRecord(
        id=StudentId(row.id),
        name=row.name,
        age=row.age,
        course=row.course,
        file_url=row.file_url,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SqlStudentRepository:
    """Students table accessed through DatabaseSessionManager."""

    backend_name = "sql"

    def __init__(self, manager: DatabaseSessionManager):
        self.manager = manager

    async def create(self, student: NormalizedStudent) -> StudentRecord:
        async with self.manager.session() as db:
            row = StudentModel(
                name=student.name,
                age=student.age,
                course=student.course,
                file_url=student.file_url,
                created_at=datetime.now(timezone.utc),
            )
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return _to_record(row)

    async def list(self) -> list[StudentRecord]:
        async with self.manager.session() as db:
            result = await db.execute(
                select(StudentModel).order_by(
                    StudentModel.created_at.asc(), StudentModel.id.asc(),
                ),
            )
            return [_to_record(row) for row in result.scalars().all()]

    async def get_by_id(self, student_id: StudentId) -> StudentRecord | None:
        async with self.manager.session() as db:
            row = await db.get(StudentModel, student_id)
            return _to_record(row) if row else None

    async def update(
        self, student_id: StudentId, student: NormalizedStudent,
    ) -> StudentRecord | None:
        async with self.manager.session() as db:
            row = await db.get(StudentModel, student_id)
            if row is None:
                return None
            row.name = student.name
            row.age = student.age
            row.course = student.course
            row.updated_at = next_updated_at(
                _as_utc(row.created_at), datetime.now(timezone.utc),
            )
            await db.commit()
            await db.refresh(row)
            return _to_record(row)

    async def delete(self, student_id: StudentId) -> bool:
        async with self.manager.session() as db:
            row = await db.get(StudentModel, student_id)
            if row is None:
                return False
            await db.delete(row)
            await db.commit()
            return True

    async def count(self) -> int:
        async with self.manager.session() as db:
            result = await db.execute(
                select(func.count()).select_from(StudentModel),
            )
            return result.scalar_one()

    async def ping(self) -> bool:
        return await self.manager.health_check()

    async def close(self) -> None:
        await self.manager.dispose()
