from collections.abc import Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cardkeeper.api.dependencies import (
    get_catalog_client,
    get_recommendation_client,
    get_store,
)
from cardkeeper.db.database import get_session
from cardkeeper.db.store import ObjectStore
from cardkeeper.main import app
from cardkeeper.models.card import CatalogRecord
from cardkeeper.models.db import Base
from cardkeeper.services.edhrec_client import EdhrecClient
from cardkeeper.services.rate_limiter import RateLimiter
from cardkeeper.services.scryfall_client import ScryfallClient

PayloadFactory = Callable[..., dict[str, Any]]
RecordFactory = Callable[..., CatalogRecord]


def _payload(name: str, card_id: str | None = None, **overrides: Any) -> dict[str, Any]:
    slug = name.lower().replace(" ", "-").replace(",", "").replace("'", "")
    payload: dict[str, Any] = {
        "object": "card",
        "id": card_id or f"id-{slug}",
        "oracle_id": f"oracle-{slug}",
        "name": name,
        "lang": "en",
        "set": "cmm",
        "set_name": "Commander Masters",
        "collector_number": "1",
        "rarity": "rare",
        "colors": [],
        "color_identity": [],
        "mana_cost": "{1}",
        "cmc": 1.0,
        "type_line": "Artifact",
        "oracle_text": "",
        "image_uris": {
            "normal": f"https://cards.scryfall.io/normal/{slug}.jpg",
            "small": f"https://cards.scryfall.io/small/{slug}.jpg",
        },
        "prices": {"usd": "1.00", "eur": "0.90"},
        "legalities": {"commander": "legal", "standard": "not_legal"},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_payload() -> PayloadFactory:
    """Build Scryfall card objects: make_payload("Sol Ring", rarity="uncommon")."""
    return _payload


@pytest.fixture
def make_record() -> RecordFactory:
    """Build CatalogRecords through the same mapping the client uses."""

    def factory(name: str, card_id: str | None = None, **overrides: Any) -> CatalogRecord:
        return CatalogRecord.from_scryfall(_payload(name, card_id, **overrides))

    return factory


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session_factory) -> ObjectStore:
    return ObjectStore(session_factory)


@pytest.fixture
def sample_decklist() -> str:
    """Mixed-format decklist as pasted from a deckbuilding site."""
    return """// Commander
1 Atraxa, Praetors' Voice

// Deck
4x Counterspell
2 Sol Ring
Forêt
# sideboard below
0 Island
"""


async def no_sleep(_delay: float) -> None:
    return None


@pytest.fixture
async def catalog_client():
    """ScryfallClient with no throttling or backoff delay, for respx-mocked tests."""
    async with ScryfallClient(
        base_url="https://api.scryfall.com",
        rate_limiter=RateLimiter(0),
        sleep=no_sleep,
    ) as client:
        yield client


@pytest.fixture
async def recommendation_client():
    """EdhrecClient with no throttling or backoff delay."""
    async with EdhrecClient(
        base_url="https://json.edhrec.com",
        rate_limiter=RateLimiter(0),
        sleep=no_sleep,
    ) as client:
        yield client


@pytest.fixture
async def client(session_factory, store, catalog_client, recommendation_client):
    """Provide an async test client with overridden database and catalog."""

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_catalog_client] = lambda: catalog_client
    app.dependency_overrides[get_recommendation_client] = lambda: recommendation_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
