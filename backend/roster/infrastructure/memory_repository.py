"""In-Memory Student Repository — process-local store behind the StudentRepository protocol.

Invariants:
    - Ids come from a monotonic counter owned by the instance; a deleted id is never reissued
    - _records preserves insertion order; list() returns records in creation order
    - Stored records are frozen dataclasses, so handing them out cannot leak mutation
    - No await between read and write: each operation is atomic on the event loop

Design Decisions:
    - Instance state, not module globals: one repository per app, swappable for tests
    - clock injectable so tests can pin timestamps
"""

import itertools
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from roster.core.domain_types import StudentId
from roster.core.student import NormalizedStudent, StudentRecord, next_updated_at


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStudentRepository:
    """Insertion-ordered dict keyed by id."""

    backend_name = "memory"

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._records: dict[StudentId, StudentRecord] = {}
        self._ids = itertools.count(1)
        self._clock = clock

    async def create(self, student: NormalizedStudent) -> StudentRecord:
        record = StudentRecord(
            id=StudentId(str(next(self._ids))),
            name=student.name,
            age=student.age,
            course=student.course,
            file_url=student.file_url,
            created_at=self._clock(),
        )
        self._records[record.id] = record
        return record

    async def list(self) -> list[StudentRecord]:
        return list(self._records.values())

    async def get_by_id(self, student_id: StudentId) -> StudentRecord | None:
        return self._records.get(student_id)

    async def update(
        self, student_id: StudentId, student: NormalizedStudent,
    ) -> StudentRecord | None:
        current = self._records.get(student_id)
        if current is None:
            return None
        updated = replace(
            current,
            name=student.name,
            age=student.age,
            course=student.course,
            updated_at=next_updated_at(current.created_at, self._clock()),
        )
        self._records[student_id] = updated
        return updated

    async def delete(self, student_id: StudentId) -> bool:
        return self._records.pop(student_id, None) is not None

    async def count(self) -> int:
        return len(self._records)

    async def ping(self) -> bool:
        return True
