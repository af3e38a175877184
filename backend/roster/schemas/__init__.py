"""Pydantic Schemas — request/response shapes for API endpoints.

Invariants:
    - Request schemas are deliberately loose; field rules live in core/validate_student.py
    - Response schemas mirror StudentRecord.to_dict()

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
