"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - StudentId is always a string, whatever the backend generates
    - Age bounds are inclusive: AGE_MIN <= age <= AGE_MAX
    - COURSE_CATALOG entries are in canonical casing and unique case-insensitively

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

StudentId = NewType("StudentId", str)


# ─── Field Rules ─────────────────────────────────────────────────

NAME_MIN_LENGTH = 3
AGE_MIN = 18
AGE_MAX = 100

COURSE_CATALOG: tuple[str, ...] = (
    "Full Stack Development",
    "Front-End Development",
    "Back-End Development",
    "AI/Machine Learning",
    "Data Analyst",
    "Data Science",
    "DevOps",
    "Cloud Computing",
    "Cybersecurity",
    "Mobile App Development",
    "UI/UX Design",
    "Blockchain Development",
    "Big Data",
    "Internet of Things",
    "Business Intelligence",
)


# ─── Enums ───────────────────────────────────────────────────────

class StudentField(str, Enum):
    """Caller-supplied fields checked by the validator."""
    NAME = "name"
    AGE = "age"
    COURSE = "course"


class FieldErrorCode(str, Enum):
    """Why a single field was rejected."""
    MIN_LENGTH = "min_length"
    RANGE = "range"
    REQUIRED = "required"
    INVALID_CHOICE = "invalid_choice"


class StorageBackend(str, Enum):
    """Persistence backends selectable via settings.storage_backend."""
    MEMORY = "memory"
    SQL = "sql"
    MONGO = "mongo"
