"""Student Validation — field rules for candidate records.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Each check_* returns (normalized_value, None) or (None, FieldError)
    - validate_student collects EVERY field error (no short-circuit), ordered name, age, course
    - In strict mode the normalized course is the catalog's canonical casing

Design Decisions:
    - Pure functions over method dispatch: testable without mocks
    - Return values (not exceptions): the service decides whether a failed
      outcome becomes an HTTP error
    - bool is rejected as an age even though it is an int subclass
"""

from collections.abc import Iterable, Mapping
from typing import Any

from roster.core.domain_types import (
    AGE_MAX, AGE_MIN, COURSE_CATALOG, NAME_MIN_LENGTH,
    FieldErrorCode, StudentField,
)
from roster.core.student import FieldError, NormalizedStudent, ValidationOutcome


def check_name(raw: Any) -> tuple[str | None, FieldError | None]:
    """Name must be a string of at least NAME_MIN_LENGTH characters after trimming."""
    name = raw.strip() if isinstance(raw, str) else ""
    if len(name) < NAME_MIN_LENGTH:
        return None, FieldError(
            StudentField.NAME.value, FieldErrorCode.MIN_LENGTH,
            f"Name must be at least {NAME_MIN_LENGTH} characters", raw,
        )
    return name, None


def coerce_age(raw: Any) -> int | None:
    """Coerce raw input to an int. Returns None when it is not an integer."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        text = raw.strip()
        if text[:1] in ("+", "-"):
            digits = text[1:]
        else:
            digits = text
        if digits.isascii() and digits.isdigit():
            return int(text)
    return None


def check_age(raw: Any) -> tuple[int | None, FieldError | None]:
    """Age must be an integer within [AGE_MIN, AGE_MAX]."""
    age = coerce_age(raw)
    if age is None or not AGE_MIN <= age <= AGE_MAX:
        return None, FieldError(
            StudentField.AGE.value, FieldErrorCode.RANGE,
            f"Age must be an integer between {AGE_MIN} and {AGE_MAX}", raw,
        )
    return age, None


def match_course(course: str, catalog: Iterable[str]) -> str | None:
    """Case-insensitive catalog lookup. Returns the canonical entry or None."""
    wanted = course.casefold()
    for entry in catalog:
        if entry.casefold() == wanted:
            return entry
    return None


def check_course(
    raw: Any, strict: bool = False, catalog: Iterable[str] = COURSE_CATALOG,
) -> tuple[str | None, FieldError | None]:
    """Course must be non-empty; in strict mode it must also match the catalog."""
    course = raw.strip() if isinstance(raw, str) else ""
    if not course:
        return None, FieldError(
            StudentField.COURSE.value, FieldErrorCode.REQUIRED,
            "Course is required", raw,
        )
    if not strict:
        return course, None
    canonical = match_course(course, catalog)
    if canonical is None:
        return None, FieldError(
            StudentField.COURSE.value, FieldErrorCode.INVALID_CHOICE,
            "Invalid course", raw,
        )
    return canonical, None


def _optional_url(raw: Any) -> str | None:
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None


def validate_student(
    candidate: Mapping[str, Any],
    *,
    strict_courses: bool = False,
    catalog: Iterable[str] = COURSE_CATALOG,
) -> ValidationOutcome:
    """Run every field check and collect all errors.

    candidate is the raw caller payload; missing keys are treated as absent
    values and fail their own rule.
    """
    catalog = tuple(catalog)
    name, name_error = check_name(candidate.get("name"))
    age, age_error = check_age(candidate.get("age"))
    course, course_error = check_course(
        candidate.get("course"), strict_courses, catalog,
    )

    errors = tuple(
        e for e in (name_error, age_error, course_error) if e is not None
    )
    if errors:
        return ValidationOutcome(errors=errors)

    return ValidationOutcome(student=NormalizedStudent(
        name=name,
        age=age,
        course=course,
        file_url=_optional_url(candidate.get("fileUrl")),
    ))
