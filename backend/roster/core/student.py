"""Student Value Types — immutable shapes that flow between validator, service and repositories.

Invariants:
    - NormalizedStudent is only ever produced by validate_student()
    - StudentRecord.updated_at is None until the first update
    - StudentRecord.updated_at >= StudentRecord.created_at when present
    - to_dict() produces the wire shape shared by every backend
    - FieldError.to_dict() is always JSON-encodable (non-finite floats are repr'd)

Design Decisions:
    - Frozen dataclasses: repositories hand out copies, callers cannot mutate stored state
    - camelCase keys in to_dict(): the client and the document store both use them
"""

import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from roster.core.domain_types import FieldErrorCode, StudentId


@dataclass(frozen=True)
class NormalizedStudent:
    """Candidate record that passed validation: trimmed, coerced, canonicalized."""
    name: str
    age: int
    course: str
    file_url: str | None = None

    def with_file_url(self, file_url: str | None) -> "NormalizedStudent":
        return replace(self, file_url=file_url)


@dataclass(frozen=True)
class StudentRecord:
    """Stored student, including server-assigned fields."""
    id: StudentId
    name: str
    age: int
    course: str
    created_at: datetime
    updated_at: datetime | None = None
    file_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "course": self.course,
            "fileUrl": self.file_url,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": (
                self.updated_at.isoformat() if self.updated_at else None
            ),
        }


@dataclass(frozen=True)
class FieldError:
    """One rejected field. value is echoed back so the client can highlight it."""
    field: str
    code: FieldErrorCode
    message: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        value = self.value
        if not isinstance(value, (str, int, float, bool, type(None))):
            value = repr(value)
        elif isinstance(value, float) and not math.isfinite(value):
            value = repr(value)
        return {
            "field": self.field,
            "code": self.code.value,
            "message": self.message,
            "value": value,
        }


@dataclass(frozen=True)
class ValidationOutcome:
    """Either a normalized student or the full list of field errors, never both."""
    student: NormalizedStudent | None = None
    errors: tuple[FieldError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def error_fields(self) -> list[str]:
        return [e.field for e in self.errors]


def next_updated_at(created_at: datetime, now: datetime) -> datetime:
    """Timestamp for an update; clamped so it never precedes created_at."""
    return max(created_at, now)
