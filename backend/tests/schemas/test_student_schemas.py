"""Student Schemas — loose candidate input and camelCase output.

Invariants:
    - StudentCandidate never rejects a JSON object, whatever its field types
    - Unknown keys are dropped
    - StudentResponse mirrors StudentRecord
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from roster.core.student import StudentRecord
from roster.schemas.student import StudentCandidate, StudentResponse


def test_candidate_accepts_any_types():
    candidate = StudentCandidate(name=5, age=[1], course=None)
    assert candidate.to_candidate() == {
        "name": 5, "age": [1], "course": None, "fileUrl": None,
    }


def test_candidate_defaults_missing_fields_to_none():
    assert StudentCandidate.model_validate({}).to_candidate()["name"] is None


def test_candidate_drops_unknown_keys():
    candidate = StudentCandidate.model_validate({"name": "Ann", "id": "x", "createdAt": "y"})
    assert "id" not in candidate.to_candidate()


def test_candidate_rejects_non_object():
    with pytest.raises(ValidationError):
        StudentCandidate.model_validate(["Ann", 22])


def test_response_from_record():
    created = datetime(2026, 1, 1, tzinfo=timezone.utc)
    record = StudentRecord(
        id="1", name="Ann Lee", age=22, course="DevOps", created_at=created,
        file_url="https://res.test/a.png",
    )
    response = StudentResponse.from_record(record)
    dumped = response.model_dump()
    assert dumped["fileUrl"] == "https://res.test/a.png"
    assert dumped["createdAt"] == created
    assert dumped["updatedAt"] is None
