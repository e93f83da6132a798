import random
from typing import List

import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from uowkit.storage.database import build_async_engine, build_session_factory
from tests.models import Base, Product

PRODUCTS_NUMBER = 200
MAX_PRICE = 500


def make_products(n: int = PRODUCTS_NUMBER, seed: int = 7) -> List[Product]:
    rng = random.Random(seed)
    return [
        Product(id=i, name=f"Product {i}", price=rng.randrange(MAX_PRICE))
        for i in range(1, n + 1)
    ]


@pytest.fixture
def products() -> List[Product]:
    """200 detached products with ids 1..200 and pseudo-random prices."""
    return make_products()


@pytest.fixture
def sync_session():
    """Synchronous SQLite session seeded with the 200 products."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    with Session(engine, autoflush=False) as session:
        session.add_all(make_products())
        session.commit()
        session.expunge_all()
        yield session
    engine.dispose()


@pytest_asyncio.fixture
async def async_engine():
    engine = build_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(async_engine):
    return build_session_factory(async_engine)


@pytest_asyncio.fixture
async def seeded_session_factory(session_factory):
    async with session_factory() as session:
        session.add_all(make_products())
        await session.commit()
    return session_factory


@pytest_asyncio.fixture
async def async_session(seeded_session_factory):
    """AsyncSession over the 200 seeded products."""
    async with seeded_session_factory() as session:
        yield session
