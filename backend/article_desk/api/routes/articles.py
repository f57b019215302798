"""Article Routes — CRUD endpoints over the article collection.

Invariants:
    - Bodies validated by Pydantic before reaching the handler (malformed JSON -> 400)
    - Handlers hold no logic: parse, call ArticleRepository, wrap in the envelope
    - Errors raised as ArticleDeskError subclasses and mapped by api/error_handlers.py
    - Create -> 201; read/update/delete -> 200; missing id -> 404; malformed id -> 400

Design Decisions:
    - Repository built per request from the process-wide store (get_store dependency)
"""

from fastapi import APIRouter, Depends, status

from article_desk.infrastructure.database import MongoStore, get_store
from article_desk.schemas.article import ArticleOut, ArticleWrite, Envelope
from article_desk.services.article_repository import ArticleRepository

router = APIRouter(prefix="/api/articles", tags=["articles"])


def get_article_repository(
    store: MongoStore = Depends(get_store),
) -> ArticleRepository:
    return ArticleRepository(store)


@router.get(
    "", response_model=Envelope[list[ArticleOut]],
    response_model_exclude_none=True,
)
async def list_articles(repo: ArticleRepository = Depends(get_article_repository)):
    """All articles, most recently updated first."""
    return {"success": True, "data": await repo.list()}


@router.post(
    "", response_model=Envelope[ArticleOut],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_article(
    body: ArticleWrite,
    repo: ArticleRepository = Depends(get_article_repository),
):
    article = await repo.create(body.title, body.content)
    return {"success": True, "data": article}


@router.get(
    "/{article_id}", response_model=Envelope[ArticleOut],
    response_model_exclude_none=True,
)
async def get_article(
    article_id: str,
    repo: ArticleRepository = Depends(get_article_repository),
):
    return {"success": True, "data": await repo.get_by_id(article_id)}


@router.put(
    "/{article_id}", response_model=Envelope[ArticleOut],
    response_model_exclude_none=True,
)
async def update_article(
    article_id: str,
    body: ArticleWrite,
    repo: ArticleRepository = Depends(get_article_repository),
):
    article = await repo.update_by_id(article_id, body.title, body.content)
    return {"success": True, "data": article}


@router.delete(
    "/{article_id}", response_model=Envelope[dict],
    response_model_exclude_none=True,
)
async def delete_article(
    article_id: str,
    repo: ArticleRepository = Depends(get_article_repository),
):
    await repo.delete_by_id(article_id)
    return {"success": True, "data": {}}
