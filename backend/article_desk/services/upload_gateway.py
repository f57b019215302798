"""Upload Gateway — validates an uploaded image and hands it to the asset storage.

Invariants:
    - Declared MIME type must be in ALLOWED_IMAGE_TYPES
    - At most max_bytes + 1 bytes are ever read; anything larger is rejected
    - Policy violations raise UploadRejectedError (400); storage failures raise StoreError (500)
    - Independent of articles: the returned URL is embedded by the editing client, not here
"""

import logging

from fastapi import UploadFile

from article_desk.core.domain_types import ALLOWED_IMAGE_TYPES
from article_desk.core.errors import UploadRejectedError
from article_desk.infrastructure.asset_storage import AssetStorage

logger = logging.getLogger(__name__)


def _format_megabytes(max_bytes: int) -> str:
    mb = max_bytes / (1024 * 1024)
    return f"{mb:g}MB"


def check_upload(content_type: str | None, size: int, max_bytes: int) -> None:
    """Pure policy check: type allow-list and size ceiling."""
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise UploadRejectedError("Invalid file type. Only images are allowed.")
    if size > max_bytes:
        raise UploadRejectedError(
            f"File too large. Maximum size is {_format_megabytes(max_bytes)}.",
        )


async def accept_upload(
    file: UploadFile | None, storage: AssetStorage, max_bytes: int,
) -> dict:
    if file is None:
        raise UploadRejectedError("No file uploaded")
    check_upload(file.content_type, file.size or 0, max_bytes)
    data = await file.read(max_bytes + 1)
    check_upload(file.content_type, len(data), max_bytes)

    stored = await storage.save(data, file.filename or "", file.content_type)
    logger.info(
        f"Stored upload {file.filename!r}",
        extra={"upload_bytes": len(data), "storage": type(storage).__name__},
    )
    return {"success": True, **{k: v for k, v in stored.items() if v is not None}}
