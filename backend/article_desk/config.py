"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - MONGODB_URI is required; absent or malformed aborts startup
    - Remote asset-host credentials required only when upload_storage == "cloudinary"
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Upload ceiling defaults per storage mode (5 MB local, 10 MB remote) unless overridden
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MB = 1024 * 1024


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Document store
    mongodb_uri: str
    mongodb_database: str = "article_desk"
    mongodb_collection: str = "articles"
    mongodb_max_pool_size: int = 10
    mongodb_server_selection_timeout_ms: int = 5000
    mongodb_socket_timeout_ms: int = 45_000

    @field_validator("mongodb_uri")
    @classmethod
    def check_mongodb_uri(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MONGODB_URI must start with mongodb:// or mongodb+srv://",
            )
        return v

    # Uploads
    upload_storage: Literal["local", "cloudinary"] = "local"
    upload_dir: str = "public/uploads"
    upload_url_prefix: str = "/uploads"
    upload_max_bytes: int | None = None

    # Remote asset host (upload_storage == "cloudinary")
    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None
    cloudinary_folder: str = "tinymce-uploads"
    cloudinary_listing_limit: int = 30

    @model_validator(mode="after")
    def check_cloudinary_credentials(self) -> "Settings":
        if self.upload_storage != "cloudinary":
            return self
        missing = [
            name for name in (
                "cloudinary_cloud_name",
                "cloudinary_api_key",
                "cloudinary_api_secret",
            )
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(
                f"Cloudinary upload storage requires: {', '.join(missing)}",
            )
        return self

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def effective_upload_max_bytes(self) -> int:
        if self.upload_max_bytes is not None:
            return self.upload_max_bytes
        return 10 * MB if self.upload_storage == "cloudinary" else 5 * MB


@lru_cache
def get_settings() -> Settings:
    return Settings()
