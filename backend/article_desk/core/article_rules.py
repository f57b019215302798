"""Article Rules — pure validation and serialization for the Article entity.

Invariants:
    - title and content must be non-empty after trimming; stored values are NOT trimmed
    - title length (as supplied) <= TITLE_MAX_LENGTH
    - Non-string title/content (None, numbers, dicts) is an InputValidationError, never a crash
    - Timestamps are UTC, truncated to milliseconds (the store's precision)
    - No IO: every function here is pure and deterministic (utc_now aside)

Design Decisions:
    - Raise InputValidationError directly: the repository and routes share one failure shape
"""

from datetime import datetime, timezone

from bson import ObjectId

from article_desk.core.domain_types import ArticleId, TITLE_MAX_LENGTH
from article_desk.core.errors import InputValidationError


def validate_article_fields(title: str | None, content: str | None) -> None:
    """Reject missing, blank or oversized article fields."""
    if not isinstance(title, str) or not title.strip():
        raise InputValidationError("Please provide a title", field="title")
    if len(title) > TITLE_MAX_LENGTH:
        raise InputValidationError(
            f"Title cannot be more than {TITLE_MAX_LENGTH} characters",
            field="title",
        )
    if not isinstance(content, str) or not content.strip():
        raise InputValidationError("Please provide content", field="content")


def check_article_id(raw: str) -> ObjectId:
    """Parse a path id into an ObjectId or raise InputValidationError."""
    if not isinstance(raw, str) or not ObjectId.is_valid(raw):
        raise InputValidationError("Invalid article id", field="id")
    return ObjectId(raw)


def utc_now() -> datetime:
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond - now.microsecond % 1000)


def _as_utc(value: datetime) -> datetime:
    # Stores configured without tz_aware hand back naive UTC datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def serialize_article(document: dict) -> dict:
    """Map a stored document to the public Article shape."""
    return {
        "id": ArticleId(str(document["_id"])),
        "title": document["title"],
        "content": document["content"],
        "createdAt": _as_utc(document["createdAt"]).isoformat(timespec="milliseconds"),
        "updatedAt": _as_utc(document["updatedAt"]).isoformat(timespec="milliseconds"),
    }
