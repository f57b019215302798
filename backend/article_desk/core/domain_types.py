"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ArticleId is the 24-hex string form of the store-assigned ObjectId
    - Title limit and accepted image types defined once, here

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ArticleId = NewType("ArticleId", str)


# ─── Limits ──────────────────────────────────────────────────────

TITLE_MAX_LENGTH = 200


# ─── Enums ───────────────────────────────────────────────────────

class ImageType(str, Enum):
    """Raster image MIME types accepted by the upload gateway."""
    JPEG = "image/jpeg"
    JPG = "image/jpg"
    PNG = "image/png"
    GIF = "image/gif"
    WEBP = "image/webp"


ALLOWED_IMAGE_TYPES = frozenset(t.value for t in ImageType)

# Fallback file extension when the uploaded filename carries none
IMAGE_EXTENSIONS = {
    ImageType.JPEG.value: ".jpg",
    ImageType.JPG.value: ".jpg",
    ImageType.PNG.value: ".png",
    ImageType.GIF.value: ".gif",
    ImageType.WEBP.value: ".webp",
}
