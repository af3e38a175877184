"""Student Value Types — wire shape and timestamp clamping.

Tests:
    - StudentRecord.to_dict uses camelCase keys and ISO timestamps
    - updatedAt serializes to None before the first update
    - next_updated_at never precedes created_at
    - records are immutable
    - field errors stay JSON-encodable for non-finite values
"""

import dataclasses
import json
from datetime import datetime, timedelta, timezone

import pytest

from roster.core.domain_types import FieldErrorCode
from roster.core.student import (
    FieldError, NormalizedStudent, StudentRecord, ValidationOutcome, next_updated_at,
)

CREATED = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _record(**overrides) -> StudentRecord:
    fields = dict(
        id="1", name="Ann Lee", age=22, course="DevOps", created_at=CREATED,
    )
    fields.update(overrides)
    return StudentRecord(**fields)


def test_to_dict_wire_shape():
    assert _record().to_dict() == {
        "id": "1",
        "name": "Ann Lee",
        "age": 22,
        "course": "DevOps",
        "fileUrl": None,
        "createdAt": "2026-01-01T12:00:00+00:00",
        "updatedAt": None,
    }


def test_to_dict_includes_updated_at_once_set():
    later = CREATED + timedelta(minutes=5)
    assert _record(updated_at=later).to_dict()["updatedAt"] == later.isoformat()


def test_next_updated_at_uses_now_when_later():
    now = CREATED + timedelta(seconds=1)
    assert next_updated_at(CREATED, now) == now


def test_next_updated_at_clamps_to_created_at():
    skewed = CREATED - timedelta(seconds=30)
    assert next_updated_at(CREATED, skewed) == CREATED


def test_record_is_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        _record().name = "Changed"


def test_with_file_url_returns_copy():
    student = NormalizedStudent("Ann Lee", 22, "DevOps")
    attached = student.with_file_url("https://cdn.example/a.pdf")
    assert student.file_url is None
    assert attached.file_url == "https://cdn.example/a.pdf"


def test_empty_outcome_is_ok():
    assert ValidationOutcome(student=NormalizedStudent("Ann", 20, "X")).ok


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_field_error_to_dict_encodes_non_finite_value(value):
    error = FieldError("age", FieldErrorCode.RANGE, "Age out of range", value)
    payload = error.to_dict()
    assert payload["value"] == repr(value)
    json.dumps(payload, allow_nan=False)


def test_field_error_to_dict_keeps_finite_float():
    error = FieldError("age", FieldErrorCode.RANGE, "Age out of range", 17.5)
    assert error.to_dict()["value"] == 17.5
