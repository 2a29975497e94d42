"""
Image uploads for profile pictures and subject images

  > image ~/Pictures/me.png

Files are checked (must look like an image, must fit the size limit) and
read asynchronously, then handed to httpx as a multipart file tuple.
"""

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

import aiofiles

from learnlink.exceptions import FileTooLargeError, InvalidFileTypeError, ValidationError


@dataclass
class ImageUpload:
    """An image file ready to be sent as multipart form data"""
    filename: str
    content: bytes
    mime_type: str

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    def as_file(self) -> Tuple[str, bytes, str]:
        return (self.filename, self.content, self.mime_type)


async def load_image(path: str, max_size_mb: float = 5) -> ImageUpload:
    """Read an image from disk, rejecting non-images and oversized files"""
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise ValidationError(f"Image not found: {path}", field="image")

    mime_type, _ = mimetypes.guess_type(str(file_path))
    if not mime_type or not mime_type.startswith("image/"):
        raise InvalidFileTypeError(mime_type or "")

    size = file_path.stat().st_size
    if size > max_size_mb * 1024 * 1024:
        raise FileTooLargeError(size / 1024 / 1024, max_size_mb)

    async with aiofiles.open(file_path, 'rb') as f:
        content = await f.read()

    return ImageUpload(filename=file_path.name, content=content, mime_type=mime_type)
