"""Upload Routes — image upload side-channel for the editing client.

Invariants:
    - POST accepts a single multipart field named "file"
    - GET lists stored images under the storage's listing key ("files" or "images")
    - No relationship to articles: URLs are embedded in article content by the client
"""

from fastapi import APIRouter, Depends, File, UploadFile, status

from article_desk.config import Settings, get_settings
from article_desk.infrastructure.asset_storage import AssetStorage, get_asset_storage
from article_desk.services.upload_gateway import accept_upload

router = APIRouter(prefix="/api/upload", tags=["upload"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile | None = File(None),
    storage: AssetStorage = Depends(get_asset_storage),
    settings: Settings = Depends(get_settings),
):
    """Validate and store one image; returns its URL and metadata."""
    return await accept_upload(
        file, storage, settings.effective_upload_max_bytes,
    )


@router.get("")
async def list_uploads(storage: AssetStorage = Depends(get_asset_storage)):
    assets = await storage.list_assets()
    return {"success": True, storage.listing_key: assets}
