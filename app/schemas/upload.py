from app.schemas.base import CamelModel


class UploadResponse(CamelModel):
    url: str
    filename: str
    original_filename: str
    size: int
    content_type: str
