"""ORM Models — SQLAlchemy declarative models for the SQL storage backend.

Invariants:
    - All models inherit from Base (db/base.py)
    - Importing this package registers every table on Base.metadata

Design Decisions:
    - One file per entity for locality
"""

from roster.models.student import Student  # noqa: F401
