"""Student ORM — SQL persistence for the student record.

Invariants:
    - id is a UUID4 hex string generated at insert, never reused
    - name, age, course are non-nullable; only validated values are written
    - updated_at is NULL until the first update

Design Decisions:
    - String primary key over Integer autoincrement: SQLite may hand a deleted
      rowid out again, a UUID cannot collide
    - Column names are snake_case; the wire shape stays camelCase via StudentRecord
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from roster.db.base import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Student(Base):
    """One row per student."""
    __tablename__ = "students"

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=_new_id,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    course: Mapped[str] = mapped_column(String(200), nullable=False)
    file_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
