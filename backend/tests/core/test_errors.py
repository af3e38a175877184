"""Error Hierarchy — verifies codes, HTTP statuses and the REST envelope.

Tests:
    - Domain errors are 4xx and recoverable; infrastructure errors are 5xx
    - StudentValidationError lists every field error under details
    - StudentNotFoundError carries the id in message and context
    - to_response() never includes details for errors without them
"""

from roster.core.domain_types import FieldErrorCode
from roster.core.errors import (
    DatabaseError,
    ErrorCategory,
    MediaUploadError,
    RateLimitExceededError,
    ResourceNotFoundError,
    RosterError,
    StudentNotFoundError,
    StudentValidationError,
)
from roster.core.student import FieldError


def _field_errors():
    return (
        FieldError("name", FieldErrorCode.MIN_LENGTH, "too short", "Al"),
        FieldError("age", FieldErrorCode.RANGE, "out of range", 12),
    )


def test_validation_error_envelope_lists_details():
    error = StudentValidationError(_field_errors())
    body = error.to_response()["error"]
    assert error.http_status == 400
    assert body["code"] == "VALIDATION_ERROR"
    assert body["category"] == "validation"
    assert [d["field"] for d in body["details"]] == ["name", "age"]
    assert body["details"][0] == {
        "field": "name", "code": "min_length", "message": "too short", "value": "Al",
    }


def test_validation_error_message_names_fields():
    assert StudentValidationError(_field_errors()).message == (
        "Invalid student data: name, age"
    )


def test_student_not_found_is_a_resource_not_found():
    error = StudentNotFoundError("999")
    assert isinstance(error, ResourceNotFoundError)
    assert error.http_status == 404
    assert error.message == "Student '999' not found"
    assert error.context.student_id == "999"
    assert error.category is ErrorCategory.RESOURCE_NOT_FOUND


def test_not_found_response_has_no_details():
    assert "details" not in StudentNotFoundError("1").to_response()["error"]


def test_domain_errors_are_recoverable():
    assert StudentNotFoundError("1").recoverable
    assert StudentValidationError(_field_errors()).recoverable
    assert RateLimitExceededError(5).recoverable


def test_infrastructure_errors_are_not_recoverable():
    db = DatabaseError("boom", "insert")
    media = MediaUploadError("boom", "connection_error")
    assert not db.recoverable and db.http_status == 503
    assert not media.recoverable and media.http_status == 502
    assert db.message == "Database insert failed: boom"


def test_rate_limit_error_records_retry_after():
    error = RateLimitExceededError(30)
    assert error.http_status == 429
    assert error.context.retry_after_ms == 30_000


def test_all_errors_share_base():
    for error in (
        StudentNotFoundError("1"), DatabaseError("x", "y"),
        MediaUploadError("x", "y"), RateLimitExceededError(1),
    ):
        assert isinstance(error, RosterError)
        assert "timestamp" in error.to_response()["error"]


def test_field_error_repr_for_unserializable_value():
    error = FieldError("age", FieldErrorCode.RANGE, "bad", [22])
    assert error.to_dict()["value"] == "[22]"
