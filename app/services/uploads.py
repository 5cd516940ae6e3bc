"""Product image upload validation and local storage."""
import logging
import os
import uuid
from pathlib import Path

from app.exceptions import InvalidFileError
from app.schemas.upload import UploadResponse

logger = logging.getLogger(__name__)

# SVG is excluded: it can carry script
ALLOWED_TYPES: dict[str, set[str]] = {
    ".jpg": {"image/jpeg"},
    ".jpeg": {"image/jpeg"},
    ".png": {"image/png"},
    ".webp": {"image/webp"},
    ".gif": {"image/gif"},
}

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB


def _extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower()


def is_valid_extension(filename: str) -> bool:
    return _extension(filename) in ALLOWED_TYPES


def is_valid_mime_type(filename: str, mime_type: str) -> bool:
    """The MIME type must be one the file's extension allows."""
    allowed = ALLOWED_TYPES.get(_extension(filename))
    if not allowed or not mime_type:
        return False
    return mime_type.split(";")[0].strip().lower() in allowed


def is_valid_file_size(size: int) -> bool:
    return 0 <= size <= MAX_FILE_SIZE


def generate_upload_filename(filename: str) -> str:
    return f"{uuid.uuid4()}{_extension(filename)}"


def validate_upload(filename: str, content_type: str, size: int) -> None:
    if not is_valid_extension(filename):
        raise InvalidFileError("Invalid file type. Allowed types: JPEG, PNG, WebP, GIF")
    if not is_valid_mime_type(filename, content_type):
        raise InvalidFileError(f"Content type {content_type or 'unknown'} does not match file extension")
    if not is_valid_file_size(size):
        raise InvalidFileError(f"File too large. Maximum file size is {MAX_FILE_SIZE // (1024 * 1024)}MB")


def save_upload(
    content: bytes,
    filename: str,
    content_type: str,
    upload_dir: str,
    url_prefix: str,
) -> UploadResponse:
    """Validate and write an image under ``upload_dir``. Returns its public URL."""
    validate_upload(filename, content_type, len(content))

    stored_name = generate_upload_filename(filename)
    target_dir = Path(upload_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / stored_name).write_bytes(content)

    logger.info(
        "Image uploaded",
        extra={"stored_name": stored_name, "size": len(content), "content_type": content_type},
    )
    return UploadResponse(
        url=f"{url_prefix.rstrip('/')}/{stored_name}",
        filename=stored_name,
        original_filename=filename,
        size=len(content),
        content_type=content_type,
    )
