"""Database Infrastructure — SQLAlchemy declarative Base.

Invariants:
    - All ORM models inherit from db.base.Base

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for local and test runs
"""
