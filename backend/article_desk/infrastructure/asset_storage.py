"""Asset Storage — where uploaded images land: local disk or the Cloudinary asset host.

Invariants:
    - Both backends return a stable retrieval URL plus whatever metadata they know
    - Local filenames are <millis>-<random><ext>; never derived from user text beyond the extension
    - Remote transport errors and non-2xx replies mapped to StoreError
    - listing_key names the listing field in GET responses ("files" local, "images" remote)

Design Decisions:
    - Cloudinary REST API over httpx instead of an SDK: same client the rest of the shell uses,
      and tests swap the transport (httpx.MockTransport) instead of patching modules
    - No `cloudinary` SDK: only two endpoints are used (signed upload, resource listing), the
      SDK is a synchronous requests-based client that would need a worker thread per call,
      and signing is a documented one-line SHA-1 over sorted params (see sign())
    - File writes run in a worker thread (asyncio.to_thread) so the event loop never blocks on disk
"""

import asyncio
import hashlib
import logging
import os
import secrets
import time
from pathlib import Path
from typing import Protocol

import httpx

from article_desk.config import Settings
from article_desk.core.domain_types import IMAGE_EXTENSIONS
from article_desk.core.errors import StoreError

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"
CLOUDINARY_TRANSFORMATION = "q_auto,f_auto/c_limit,h_1200,w_1200"


class AssetStorage(Protocol):
    """Contract for image storage backends."""
    listing_key: str

    async def save(
        self, data: bytes, filename: str, content_type: str,
    ) -> dict: ...

    async def list_assets(self) -> list[dict]: ...

    async def close(self) -> None: ...


def _extension_for(filename: str, content_type: str) -> str:
    ext = os.path.splitext(os.path.basename(filename or ""))[1].lower()
    if ext and ext[1:].isalnum():
        return ext
    return IMAGE_EXTENSIONS.get(content_type, "")


class LocalAssetStorage:
    """Writes images below a directory served back under url_prefix."""

    listing_key = "files"

    def __init__(self, directory: str | Path, url_prefix: str = "/uploads"):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    def _url(self, name: str) -> str:
        return f"{self.url_prefix}/{name}"

    def _write(self, name: str, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / name).write_bytes(data)

    async def save(self, data: bytes, filename: str, content_type: str) -> dict:
        ext = _extension_for(filename, content_type)
        name = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"
        try:
            await asyncio.to_thread(self._write, name, data)
        except OSError as e:
            logger.error(f"Failed to write upload {name}: {e}")
            raise StoreError("Could not store uploaded file", "write")
        url = self._url(name)
        return {
            "url": url,
            "location": url,
            "filename": name,
            "bytes": len(data),
            "format": ext.lstrip(".") or None,
        }

    def _scan(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(p.name for p in self.directory.iterdir() if p.is_file())

    async def list_assets(self) -> list[dict]:
        try:
            names = await asyncio.to_thread(self._scan)
        except OSError as e:
            logger.error(f"Failed to list uploads: {e}")
            raise StoreError("Could not list uploaded files", "list")
        return [{"name": name, "url": self._url(name)} for name in names]

    async def close(self) -> None:
        return None


class CloudinaryAssetStorage:
    """Signed uploads to the Cloudinary REST API."""

    listing_key = "images"

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "tinymce-uploads",
        listing_limit: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.listing_limit = listing_limit
        self._client = httpx.AsyncClient(
            base_url=f"{CLOUDINARY_API_BASE}/{cloud_name}",
            timeout=30.0,
            transport=transport,
        )

    def sign(self, params: dict[str, str]) -> str:
        """SHA-1 signature over the sorted params, as the upload API expects."""
        payload = "&".join(f"{k}={params[k]}" for k in sorted(params))
        return hashlib.sha1(
            (payload + self.api_secret).encode("utf-8"),
        ).hexdigest()

    async def save(self, data: bytes, filename: str, content_type: str) -> dict:
        params = {
            "folder": self.folder,
            "timestamp": str(int(time.time())),
            "transformation": CLOUDINARY_TRANSFORMATION,
        }
        form = {**params, "api_key": self.api_key, "signature": self.sign(params)}
        try:
            resp = await self._client.post(
                "/image/upload",
                data=form,
                files={"file": (filename or "upload", data, content_type)},
            )
        except httpx.HTTPError as e:
            logger.error(f"Cloudinary upload failed: {e}", extra={"storage": "cloudinary"})
            raise StoreError("Could not reach the asset host", "upload")
        if resp.status_code not in (200, 201):
            logger.error(
                f"Cloudinary upload rejected: {resp.text}",
                extra={"storage": "cloudinary", "status_code": resp.status_code},
            )
            raise StoreError("Asset host rejected the upload", "upload")
        result = resp.json()
        return {
            "url": result["secure_url"],
            "public_id": result["public_id"],
            "width": result.get("width"),
            "height": result.get("height"),
            "format": result.get("format"),
            "bytes": result.get("bytes"),
        }

    async def list_assets(self) -> list[dict]:
        try:
            resp = await self._client.get(
                "/resources/image/upload",
                params={
                    "prefix": f"{self.folder}/",
                    "max_results": self.listing_limit,
                },
                auth=(self.api_key, self.api_secret),
            )
        except httpx.HTTPError as e:
            logger.error(f"Cloudinary listing failed: {e}", extra={"storage": "cloudinary"})
            raise StoreError("Could not reach the asset host", "list")
        if resp.status_code != 200:
            logger.error(
                f"Cloudinary listing rejected: {resp.text}",
                extra={"storage": "cloudinary", "status_code": resp.status_code},
            )
            raise StoreError("Asset host rejected the listing", "list")
        return [
            {
                "public_id": r["public_id"],
                "url": r["secure_url"],
                "width": r.get("width"),
                "height": r.get("height"),
                "created_at": r.get("created_at"),
                "bytes": r.get("bytes"),
            }
            for r in resp.json().get("resources", [])
        ]

    async def close(self) -> None:
        await self._client.aclose()


def build_asset_storage(settings: Settings) -> AssetStorage:
    if settings.upload_storage == "cloudinary":
        return CloudinaryAssetStorage(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
            listing_limit=settings.cloudinary_listing_limit,
        )
    return LocalAssetStorage(settings.upload_dir, settings.upload_url_prefix)


# Singleton (initialized on startup)
asset_storage: AssetStorage | None = None


def init_asset_storage(settings: Settings) -> AssetStorage:
    global asset_storage
    asset_storage = build_asset_storage(settings)
    return asset_storage


async def close_asset_storage() -> None:
    global asset_storage
    if asset_storage is not None:
        await asset_storage.close()
    asset_storage = None


def get_asset_storage() -> AssetStorage:
    """FastAPI dependency for the configured asset storage."""
    if not asset_storage:
        raise StoreError("Asset storage not initialized", "connect")
    return asset_storage
