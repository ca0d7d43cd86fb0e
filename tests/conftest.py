from __future__ import annotations

import asyncio
import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from storefront.core.database import create_engine_for, create_session_factory, get_session_factory, init_db
from storefront.main import app


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """
    Session factory over a fresh SQLite file with all tables created.
    """
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await init_db(engine)
    try:
        yield create_session_factory(engine)
    finally:
        await engine.dispose()


@pytest.fixture
def client(tmp_path):
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    asyncio.run(init_db(engine))
    factory = create_session_factory(engine)

    app.dependency_overrides[get_session_factory] = lambda: factory
    try:
        with TestClient(app) as test_client:
            test_client.session_factory = factory
            yield test_client
    finally:
        app.dependency_overrides.clear()
        asyncio.run(engine.dispose())
