"""Root conftest — shared test configuration and store/app fixtures.

Invariants:
    - MONGODB_URI set before article_desk.main is imported (settings load at import)
    - Every test gets a fresh FakeMongoServer; nothing touches a real store
    - store_manager patched for the app; asset storage overridden to a tmp directory

Design Decisions:
    - MongoStore built with the fake client_factory: the real ensure_connected()
      path runs in every route test
"""

import os

# Ensure tests never reach a real store or asset host
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/article_desk_test")
os.environ.setdefault("UPLOAD_STORAGE", "local")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

import article_desk.infrastructure.database as db_module  # noqa: E402
from article_desk.infrastructure.asset_storage import (  # noqa: E402
    LocalAssetStorage, get_asset_storage,
)
from article_desk.infrastructure.database import MongoStore  # noqa: E402
from article_desk.main import app  # noqa: E402
from article_desk.services.article_repository import ArticleRepository  # noqa: E402

from tests.fake_mongo import FakeMongoServer  # noqa: E402

TEST_DATABASE = "article_desk_test"


@pytest.fixture
def mongo_server():
    return FakeMongoServer()


@pytest.fixture
def store(mongo_server):
    return MongoStore(
        "mongodb://localhost:27017/article_desk_test",
        TEST_DATABASE,
        "articles",
        client_factory=mongo_server.client_factory,
    )


@pytest.fixture
def articles_collection(mongo_server):
    """Raw fake collection behind the store, for seeding and failure injection."""
    return mongo_server.database(TEST_DATABASE)["articles"]


@pytest.fixture
def repo(store):
    return ArticleRepository(store)


@pytest.fixture
def upload_storage(tmp_path):
    return LocalAssetStorage(tmp_path / "uploads", "/uploads")


@pytest.fixture
async def client(store, upload_storage, monkeypatch):
    """FastAPI test client with the store and asset storage swapped for fakes."""
    monkeypatch.setattr(db_module, "store_manager", store)
    app.dependency_overrides[get_asset_storage] = lambda: upload_storage

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
