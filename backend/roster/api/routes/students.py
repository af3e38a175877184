"""Student Routes — CRUD endpoints over the configured student repository.

Invariants:
    - Bodies are parsed into a loose candidate; field rules are applied by StudentService
    - POST accepts JSON or a multipart form with an optional `file` part
    - An attached file is size/type-checked before anything else happens
    - Responses have the same shape whatever the storage backend

Design Decisions:
    - Body parsed from Request instead of a typed parameter: one endpoint serves both
      JSON and multipart clients, and a malformed body still maps to a 400
    - File read is capped at upload_max_bytes + 1 so an oversized upload is never
      held in memory in full
"""

from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from roster.api.dependencies import get_app_settings, get_student_service
from roster.config import Settings
from roster.core.validate_upload import check_upload
from roster.schemas.student import DeleteResponse, StudentCandidate, StudentResponse
from roster.services.student_service import FileUpload, StudentService

router = APIRouter(prefix="/students", tags=["students"])

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _is_form(request: Request) -> bool:
    return request.headers.get("content-type", "").startswith(FORM_CONTENT_TYPES)


async def _read_json_candidate(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError:
        raise RequestValidationError([{
            "loc": ("body",),
            "msg": "Request body must be valid JSON",
            "type": "json_invalid",
        }])
    try:
        return StudentCandidate.model_validate(payload).to_candidate()
    except ValidationError as e:
        raise RequestValidationError(e.errors())


async def _read_form_candidate(
    request: Request, max_upload_bytes: int,
) -> tuple[dict[str, Any], FileUpload | None]:
    form = await request.form()
    candidate = StudentCandidate(
        name=form.get("name"), age=form.get("age"), course=form.get("course"),
    ).to_candidate()

    file = form.get("file")
    if not isinstance(file, UploadFile) or not file.filename:
        return candidate, None

    content = await file.read(max_upload_bytes + 1)
    rejection = check_upload(len(content), file.content_type, max_upload_bytes)
    if rejection is not None:
        raise rejection
    return candidate, FileUpload(
        filename=file.filename,
        content=content,
        content_type=file.content_type or "application/octet-stream",
    )


@router.get("", response_model=list[StudentResponse])
async def list_students(service: StudentService = Depends(get_student_service)):
    """All students, in backend order."""
    records = await service.list_students()
    return [StudentResponse.from_record(r) for r in records]


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: str, service: StudentService = Depends(get_student_service),
):
    record = await service.get_student(student_id)
    return StudentResponse.from_record(record)


@router.post(
    "", response_model=StudentResponse, status_code=status.HTTP_201_CREATED,
)
async def create_student(
    request: Request,
    service: StudentService = Depends(get_student_service),
    settings: Settings = Depends(get_app_settings),
):
    """Create a student. Multipart requests may attach an image or PDF as `file`."""
    upload = None
    if _is_form(request):
        candidate, upload = await _read_form_candidate(
            request, settings.upload_max_bytes,
        )
    else:
        candidate = await _read_json_candidate(request)
    record = await service.create_student(candidate, upload)
    return StudentResponse.from_record(record)


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: str,
    request: Request,
    service: StudentService = Depends(get_student_service),
):
    """Replace name, age and course. 404 is reported before any field error."""
    if _is_form(request):
        form = await request.form()
        candidate = StudentCandidate(
            name=form.get("name"), age=form.get("age"), course=form.get("course"),
        ).to_candidate()
    else:
        candidate = await _read_json_candidate(request)
    record = await service.update_student(student_id, candidate)
    return StudentResponse.from_record(record)


@router.delete("/{student_id}", response_model=DeleteResponse)
async def delete_student(
    student_id: str, service: StudentService = Depends(get_student_service),
):
    deleted_id = await service.delete_student(student_id)
    return DeleteResponse(id=deleted_id)
