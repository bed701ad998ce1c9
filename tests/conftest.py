import json
import shutil
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from nendocatalog.models.db import Base
from nendocatalog.models.record import Record
from nendocatalog.services.catalog_loader import parse_catalog

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def raw_catalog() -> list[dict[str, Any]]:
    """Sample catalog: a base/DX pair, a standalone DX and plain records."""
    with open(FIXTURES / "catalog_sample.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def records(raw_catalog: list[dict[str, Any]]) -> list[Record]:
    return parse_catalog(raw_catalog)


@pytest.fixture
def by_id(records: list[Record]) -> dict[str, Record]:
    return {r.id: r for r in records}


@pytest.fixture
def ja_overrides() -> dict[str, dict[str, Any]]:
    with open(FIXTURES / "inventory-ja.json", encoding="utf-8") as f:
        raw = json.load(f)
    return {k: v for k, v in raw.items() if isinstance(v, dict)}


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data directory holding the sample catalog and Japanese overrides."""
    shutil.copy(FIXTURES / "catalog_sample.json", tmp_path / "nendoroids.json")
    shutil.copy(FIXTURES / "inventory-ja.json", tmp_path / "inventory-ja.json")
    return tmp_path


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
