"""Student Service — validation, persistence and attachment upload for student records.

Invariants:
    - Nothing is written unless validation passes
    - update checks existence BEFORE validating: a missing id is a 404 even with a bad body
    - An attached file is uploaded only after validation passes, and its URL is awaited
      before the record is created; an upload failure aborts the create
    - update never changes file_url or created_at

Design Decisions:
    - Repository and media client injected: the same service runs on every backend
    - Repositories report absence with None/False; this layer converts it to StudentNotFoundError
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from roster.core.domain_types import COURSE_CATALOG, StudentId
from roster.core.errors import (
    ErrorContext, MediaUploadError, StudentNotFoundError, StudentValidationError,
)
from roster.core.repository_protocols import MediaUploader, StudentRepository
from roster.core.student import NormalizedStudent, StudentRecord
from roster.core.validate_student import validate_student

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileUpload:
    """File received with a create request, already read into memory."""
    filename: str
    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)


class StudentService:
    """Orchestrates validator, repository and media host for one request."""

    def __init__(
        self,
        repository: StudentRepository,
        media_client: MediaUploader | None = None,
        *,
        strict_courses: bool = False,
        catalog: Iterable[str] = COURSE_CATALOG,
    ):
        self.repository = repository
        self.media_client = media_client
        self.strict_courses = strict_courses
        self.catalog = tuple(catalog)

    def validate(
        self, candidate: Mapping[str, Any], student_id: str | None = None,
    ) -> NormalizedStudent:
        """Return the normalized student or raise StudentValidationError."""
        outcome = validate_student(
            candidate, strict_courses=self.strict_courses, catalog=self.catalog,
        )
        if not outcome.ok:
            logger.warning(
                f"Rejected student data: {', '.join(outcome.error_fields)}",
                extra={"student_id": student_id, "error_code": "VALIDATION_ERROR"},
            )
            raise StudentValidationError(
                outcome.errors, ErrorContext(student_id=student_id),
            )
        return outcome.student

    async def list_students(self) -> list[StudentRecord]:
        return await self.repository.list()

    async def get_student(self, student_id: str) -> StudentRecord:
        record = await self.repository.get_by_id(StudentId(student_id))
        if record is None:
            raise StudentNotFoundError(student_id)
        return record

    async def create_student(
        self, candidate: Mapping[str, Any], upload: FileUpload | None = None,
    ) -> StudentRecord:
        student = self.validate(candidate)
        if upload is not None:
            file_url = await self._upload(upload)
            student = student.with_file_url(file_url)
        record = await self.repository.create(student)
        logger.info("Student created", extra={"student_id": record.id})
        return record

    async def update_student(
        self, student_id: str, candidate: Mapping[str, Any],
    ) -> StudentRecord:
        await self.get_student(student_id)
        student = self.validate(candidate, student_id)
        record = await self.repository.update(StudentId(student_id), student)
        if record is None:
            # deleted between the existence check and the write
            raise StudentNotFoundError(student_id)
        logger.info("Student updated", extra={"student_id": record.id})
        return record

    async def delete_student(self, student_id: str) -> StudentId:
        deleted = await self.repository.delete(StudentId(student_id))
        if not deleted:
            raise StudentNotFoundError(student_id)
        logger.info("Student deleted", extra={"student_id": student_id})
        return StudentId(student_id)

    async def _upload(self, upload: FileUpload) -> str:
        if self.media_client is None:
            raise MediaUploadError(
                "no media host configured", "not_configured",
            )
        return await self.media_client.upload(
            upload.filename, upload.content, upload.content_type,
        )
