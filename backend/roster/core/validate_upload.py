"""Upload Acceptance — size and content-type rules for attached files.

Invariants:
    - Pure: operates on metadata already read from the request
    - Accepts image/* and application/pdf only
    - Returns an UploadRejectedError on violation, None on success

Design Decisions:
    - Checked before the record is validated or written, so a rejected file
      never reaches the media host
"""

from roster.core.errors import UploadRejectedError

ALLOWED_CONTENT_TYPES = ("application/pdf",)
ALLOWED_CONTENT_PREFIXES = ("image/",)


def is_allowed_content_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return (
        media_type in ALLOWED_CONTENT_TYPES
        or media_type.startswith(ALLOWED_CONTENT_PREFIXES)
    )


def check_upload(
    size: int, content_type: str | None, max_bytes: int,
) -> UploadRejectedError | None:
    """Size first, then type: an oversized file is reported as too large."""
    if size > max_bytes:
        return UploadRejectedError(
            f"File exceeds the {max_bytes // 1024} KB limit",
            "FILE_TOO_LARGE",
        )
    if not is_allowed_content_type(content_type):
        return UploadRejectedError(
            "Invalid file type. Only images/PDF allowed.",
            "INVALID_FILE_TYPE",
        )
    return None
