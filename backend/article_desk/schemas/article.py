"""Article Schemas — Pydantic models for the article endpoints and the response envelope.

Invariants:
    - ArticleWrite accepts exactly strings for title/content; emptiness/length rules live in
      core/article_rules.py so direct repository callers get the same checks
    - Every response is wrapped as {"success": bool, "data"?: T, "error"?: str}

Design Decisions:
    - Strict str fields: a number or object sent as title is a 400, not a silent coercion
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, StrictStr

T = TypeVar("T")


class ArticleWrite(BaseModel):
    """Body for create and update."""
    title: StrictStr
    content: StrictStr


class ArticleOut(BaseModel):
    """Public Article shape."""
    id: str
    title: str
    content: str
    createdAt: str
    updatedAt: str


class Envelope(BaseModel, Generic[T]):
    """Uniform response wrapper."""
    success: bool = True
    data: T | None = None
    error: str | None = None
