"""
Test configuration and fixtures
"""

from typing import Dict, List, Tuple, Union

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlmodel import select

from feedsync.api.deps import get_fetcher
from feedsync.core.config import settings
from feedsync.core.database import create_engine_from_url, create_sessionmaker, get_async_session, init_db
from feedsync.main import app
from feedsync.models import Category, Product, SupplierFeed
from feedsync.services.fetcher import DocumentFetcher


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FEED_URL = "https://feeds.example.com/catalog.xml"
YML_URL = "https://vendor.example.com/export.yml"


YML_CATALOG = """<?xml version="1.0" encoding="UTF-8"?>
<yml_catalog date="2026-10-01 10:00">
  <shop>
    <name>Demo vendor</name>
    <categories>
      <category id="1">Взуття</category>
      <category id="2" parentId="1">Кросівки</category>
    </categories>
    <offers>
      <offer id="100" available="true">
        <vendorCode>SKU-100</vendorCode>
        <name>Кросівки Run</name>
        <price>1 299,50</price>
        <categoryId>2</categoryId>
        <picture>https://cdn.example.com/100-1.jpg</picture>
        <picture>https://cdn.example.com/100-2.jpg</picture>
        <picture>https://cdn.example.com/100-1.jpg</picture>
        <description><![CDATA[<p>Легкі</p>]]></description>
      </offer>
      <offer id="200" available="false">
        <name>Сандалі</name>
        <price>450</price>
        <categoryId>1</categoryId>
        <picture>https://cdn.example.com/200.jpg</picture>
      </offer>
      <offer available="true">
        <name>No code</name>
        <price>10</price>
      </offer>
    </offers>
  </shop>
</yml_catalog>
"""


GENERIC_CATALOG = """<?xml version="1.0" encoding="UTF-8"?>
<catalog>
  <items>
    <item>
      <code>A-1</code>
      <title>Lamp</title>
      <cost>19.99 USD</cost>
      <stock>в наявності</stock>
      <photos>
        <photo>https://img.example.com/a1.jpg</photo>
        <photo>https://img.example.com/a1-side.jpg</photo>
      </photos>
      <group>Lighting</group>
    </item>
    <item>
      <code>A-2</code>
      <title>Chair</title>
      <cost>on request</cost>
      <stock>0</stock>
    </item>
    <item>
      <code>A-3</code>
      <title>Desk</title>
      <cost>120,00</cost>
      <stock>5</stock>
    </item>
  </items>
</catalog>
"""


GENERIC_FEED_PATHS = {
    "item_path": "catalog.items.item",
    "sku_path": "code",
    "name_path": "title",
    "price_path": "cost",
    "stock_path": "stock",
    "photo_path": "photos.photo",
    "category_path": "group",
}


class FeedServer:
    """In-process HTTP server for feed documents, served through httpx.MockTransport"""

    def __init__(self):
        self.documents: Dict[str, Tuple[int, Union[str, bytes, Exception], Dict[str, str]]] = {}
        self.requests: List[str] = []

    def publish(self, url: str, body: Union[str, bytes], status: int = 200, headers: Dict[str, str] = None):
        self.documents[url] = (status, body, headers or {"content-type": "application/xml"})

    def fail(self, url: str, error: Exception):
        self.documents[url] = (0, error, {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url not in self.documents:
            return httpx.Response(404, text="not found")

        status, body, headers = self.documents[url]
        if isinstance(body, Exception):
            raise body
        content = body.encode("utf-8") if isinstance(body, str) else body
        return httpx.Response(status, content=content, headers=headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def fetcher(self, timeout: float = 5.0) -> DocumentFetcher:
        return DocumentFetcher(timeout=timeout, transport=self.transport)


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test"""
    engine = create_engine_from_url(TEST_DATABASE_URL)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_sessionmaker(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a test database session"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def feed_server():
    return FeedServer()


@pytest.fixture
def fetcher(feed_server):
    return feed_server.fetcher()


@pytest_asyncio.fixture
async def client(db_session, fetcher):
    """Create test client with database and network overrides"""

    async def get_test_session():
        yield db_session

    async def get_test_fetcher():
        return fetcher

    app.dependency_overrides[get_async_session] = get_test_session
    app.dependency_overrides[get_fetcher] = get_test_fetcher

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def import_secret(monkeypatch):
    monkeypatch.setattr(settings, "import_secret", "s3cret")
    monkeypatch.setattr(settings, "import_feed_url", "")
    return "s3cret"


@pytest.fixture
def make_feed(db_session):
    """Persist a supplier feed configuration"""

    async def _make_feed(**overrides) -> SupplierFeed:
        values = {"name": "Demo supplier", "url": FEED_URL, **GENERIC_FEED_PATHS}
        values.update(overrides)
        feed = SupplierFeed(**values)
        db_session.add(feed)
        await db_session.commit()
        await db_session.refresh(feed)
        return feed

    return _make_feed


@pytest.fixture
def read_catalog(session_factory):
    """Read products and categories through a separate session"""

    async def _read_catalog() -> Tuple[Dict[str, Product], Dict[str, Category]]:
        async with session_factory() as session:
            products = (await session.exec(select(Product))).all()
            categories = (await session.exec(select(Category))).all()
        return (
            {product.sku: product for product in products},
            {category.slug: category for category in categories},
        )

    return _read_catalog
