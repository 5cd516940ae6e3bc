from fastapi import APIRouter, File, UploadFile, status

from app.api.deps import CurrentUser
from app.config import settings
from app.schemas.upload import UploadResponse
from app.services.uploads import MAX_FILE_SIZE, save_upload
from app.exceptions import InvalidFileError

router = APIRouter()


@router.post("", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(current_user: CurrentUser, file: UploadFile = File(...)):
    """Store a product image and return its public URL."""
    if not file.filename:
        raise InvalidFileError("No file provided")

    # At most one byte past the limit
    content = await file.read(MAX_FILE_SIZE + 1)

    return save_upload(
        content,
        filename=file.filename,
        content_type=file.content_type or "",
        upload_dir=settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
    )
