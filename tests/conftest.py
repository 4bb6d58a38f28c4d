"""Fixtures — in-memory Redis image cache."""

import pytest_asyncio
from fakeredis.aioredis import FakeRedis

from src.cache.redis import ImageCache


@pytest_asyncio.fixture
async def image_cache():
    """ImageCache backed by an in-memory FakeRedis instance."""
    client = FakeRedis()
    cache = ImageCache(client, default_ttl=3600)
    yield cache
    await client.aclose()
