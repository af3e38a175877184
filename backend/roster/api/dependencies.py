"""Request Dependencies — hand routes the per-app repository, media client and settings.

Invariants:
    - The repository lives on app.state (set by the lifespan or by tests), never in a module global
    - A fresh StudentService wraps the shared repository per request

Design Decisions:
    - Depends() functions over importing singletons: tests swap app.state or use
      dependency_overrides
"""

from fastapi import Depends, Request

from roster.config import Settings
from roster.core.repository_protocols import StudentRepository
from roster.services.student_service import StudentService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> StudentRepository:
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise RuntimeError("Student repository not initialized")
    return repository


def get_student_service(
    request: Request,
    repository: StudentRepository = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
) -> StudentService:
    return StudentService(
        repository,
        getattr(request.app.state, "media_client", None),
        strict_courses=settings.strict_courses,
    )
