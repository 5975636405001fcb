import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import scamscan.models.models  # noqa: F401
from scamscan.api.deps import get_analyzer, get_http_client, get_price_oracle
from scamscan.db import Base
from scamscan.db.db import get_db
from scamscan.main import app
from scamscan.schemas.schemas import ComparableListing, ImageAnalysisResult, TextAnalysisResult
from scamscan.services.price_oracle import PriceOracle
from scamscan.services.price_sources import StaticPriceSource


class FakeAnalyzer:
    """Stands in for ListingAnalyzer with canned answers."""

    def __init__(self, text_result=None, image_result=None):
        self.text_result = text_result or TextAnalysisResult(
            title="Listing", scam_score=60, analysis="Looks mostly fine.", red_flags=[],
        )
        self.image_result = image_result or ImageAnalysisResult(description="A phone on a table")
        self.text_error = None
        self.image_error = None
        self.text_calls = []
        self.image_calls = []

    async def analyze_text(self, listing):
        self.text_calls.append(listing)
        if self.text_error:
            raise self.text_error
        return self.text_result

    async def analyze_image(self, image_url):
        self.image_calls.append(image_url)
        if self.image_error:
            raise self.image_error
        return self.image_result


def listings(*prices):
    return [
        ComparableListing(title=f"Comparable {i}", price=p, url=f"https://shop.example/{i}", trusted=i % 2 == 0)
        for i, p in enumerate(prices)
    ]


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_analyzer():
    return FakeAnalyzer()


@pytest.fixture
def price_source():
    return StaticPriceSource(listings(900, 1100), name="static")


@pytest.fixture
def oracle(price_source):
    return PriceOracle([price_source])


@pytest.fixture
def pages():
    """url -> (status, html) served to the scraper."""
    return {}


@pytest.fixture
async def scrape_client(pages):
    def handler(request: httpx.Request) -> httpx.Response:
        status, html = pages.get(str(request.url), (404, "not found"))
        return httpx.Response(status, text=html)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        yield client


@pytest.fixture
async def client(session_factory, fake_analyzer, oracle, scrape_client):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_analyzer] = lambda: fake_analyzer
    app.dependency_overrides[get_price_oracle] = lambda: oracle
    app.dependency_overrides[get_http_client] = lambda: scrape_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
