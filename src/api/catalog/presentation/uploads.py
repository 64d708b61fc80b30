"""Conversion of multipart uploads into storage input."""

from fastapi import UploadFile

from catalog.ports.exceptions import UploadTooLargeError
from catalog.ports.storage import ImageUpload

CHUNK_SIZE = 64 * 1024


async def read_upload(file: UploadFile, max_bytes: int) -> ImageUpload:
    """Read an uploaded file, stopping as soon as it passes ``max_bytes``.

    Raises:
        UploadTooLargeError: If the file is larger than ``max_bytes``
    """
    filename = file.filename or "upload"
    chunks: list[bytes] = []
    size = 0
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise UploadTooLargeError(
                f"Image {filename!r} exceeds the limit of {max_bytes} bytes"
            )
        chunks.append(chunk)
    return ImageUpload(
        content=b"".join(chunks),
        filename=filename,
        content_type=file.content_type or "application/octet-stream",
    )
