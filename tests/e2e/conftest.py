from typing import AsyncGenerator

import pytest_asyncio
from beanie import init_beanie
from pymongo import AsyncMongoClient

from suiteflow.db.docs import ALL_DOCUMENTS
from suiteflow.settings import Settings


@pytest_asyncio.fixture(autouse=True)
async def beanie_db(test_settings: Settings) -> AsyncGenerator[None, None]:
    """Fresh test database per test, bound to beanie."""
    client: AsyncMongoClient = AsyncMongoClient(test_settings.MONGODB_URL, tz_aware=True, serverSelectionTimeoutMS=5000)
    await client.drop_database(test_settings.DATABASE_NAME)
    await init_beanie(database=client[test_settings.DATABASE_NAME], document_models=ALL_DOCUMENTS)
    yield
    await client.drop_database(test_settings.DATABASE_NAME)
    await client.close()
