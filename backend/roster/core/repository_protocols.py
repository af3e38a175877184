"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Absent records are reported as None / False, never raised; the service
      layer turns them into StudentNotFoundError
    - Identifiers the backend cannot parse are treated as absent

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the in-memory one simply never awaits
"""

from typing import Protocol

from roster.core.domain_types import StudentId
from roster.core.student import NormalizedStudent, StudentRecord


class StudentRepository(Protocol):
    """Contract for student persistence — implemented by shell."""
    backend_name: str

    async def create(self, student: NormalizedStudent) -> StudentRecord: ...
    async def list(self) -> list[StudentRecord]: ...
    async def get_by_id(self, student_id: StudentId) -> StudentRecord | None: ...
    async def update(
        self, student_id: StudentId, student: NormalizedStudent,
    ) -> StudentRecord | None: ...
    async def delete(self, student_id: StudentId) -> bool: ...
    async def count(self) -> int: ...
    async def ping(self) -> bool: ...


class MediaUploader(Protocol):
    """Contract for the remote media host — implemented by shell."""
    async def upload(
        self, filename: str, content: bytes, content_type: str,
    ) -> str: ...
