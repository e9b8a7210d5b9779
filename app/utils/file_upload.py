"""
File Upload Utility - read registration proof images from multipart uploads.

Supported formats:
- JPEG (image/jpeg)
- PNG (image/png)

Max file size: 3MB
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, UploadFile


MAX_IMAGE_SIZE_MB = 3
MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024
ALLOWED_IMAGE_MIME_TYPES = {"image/jpeg", "image/png"}


@dataclass
class UploadedImage:
    content: bytes
    content_type: str
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


async def read_registration_image(file: UploadFile) -> UploadedImage:
    """
    Read an uploaded registration image fully into memory.

    Args:
        file: FastAPI UploadFile from the `image` form field

    Returns:
        UploadedImage with the raw bytes and content type

    Raises:
        HTTPException(400) for a wrong content type, an empty file or
        a file over the size limit
    """
    if file.content_type not in ALLOWED_IMAGE_MIME_TYPES:
        raise HTTPException(status_code=400, detail="Incorrect image format")

    # Read one byte past the limit so oversize files are detected without reading them whole
    content = await file.read(MAX_IMAGE_SIZE_BYTES + 1)

    if len(content) > MAX_IMAGE_SIZE_BYTES:
        raise HTTPException(status_code=400, detail="File too large")

    if not content:
        raise HTTPException(status_code=400, detail="Image file is empty")

    return UploadedImage(content=content, content_type=file.content_type, filename=file.filename)
