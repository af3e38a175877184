"""Student Schemas — candidate input and record output at the HTTP boundary.

Invariants:
    - StudentCandidate accepts any JSON object; every field is optional and untyped
    - Unknown keys are ignored, so clients cannot set id, createdAt or updatedAt
    - fileUrl is honoured on create only; updates never change it
    - StudentResponse field names are the camelCase wire names

Design Decisions:
    - No Field constraints on the candidate: a 400 must list every broken field at once,
      which the pure validator does and Pydantic's first-error typing would not
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from roster.core.student import StudentRecord


class StudentCandidate(BaseModel):
    """Raw create/update body, validated later by validate_student()."""
    model_config = ConfigDict(extra="ignore")

    name: Any = None
    age: Any = None
    course: Any = None
    fileUrl: Any = None

    def to_candidate(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "age": self.age,
            "course": self.course,
            "fileUrl": self.fileUrl,
        }


class StudentResponse(BaseModel):
    """Stored student as returned by every endpoint."""
    id: str
    name: str
    age: int
    course: str
    fileUrl: str | None = None
    createdAt: datetime
    updatedAt: datetime | None = None

    @classmethod
    def from_record(cls, record: StudentRecord) -> "StudentResponse":
        return cls(
            id=record.id,
            name=record.name,
            age=record.age,
            course=record.course,
            fileUrl=record.file_url,
            createdAt=record.created_at,
            updatedAt=record.updated_at,
        )


class DeleteResponse(BaseModel):
    message: str = "Deleted"
    id: str


class HealthResponse(BaseModel):
    status: str = "ok"
    time: datetime
