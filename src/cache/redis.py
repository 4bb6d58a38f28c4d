"""Redis blob cache for generated images — get/put with TTL."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

import redis.asyncio as redis
from redis.backoff import ExponentialBackoff
from redis.retry import Retry

logger = logging.getLogger(__name__)

KEY_PREFIX = "image:"


@dataclass(frozen=True)
class CachedImage:
    data: bytes
    content_type: str


def _generate_image_id() -> str:
    return uuid.uuid4().hex[:12]


class ImageCache:
    """Thin async wrapper around Redis holding image bytes for a limited time."""

    def __init__(self, client: redis.Redis, default_ttl: int = 3600) -> None:
        self._client = client
        self._default_ttl = default_ttl

    async def get(self, image_id: str) -> CachedImage | None:
        """Return the cached image, or ``None`` on miss / error."""
        try:
            raw = await self._client.hgetall(f"{KEY_PREFIX}{image_id}")
        except redis.RedisError:
            logger.warning("image cache get failed", extra={"image_id": image_id}, exc_info=True)
            return None

        if not raw or b"data" not in raw:
            logger.debug("image cache miss", extra={"image_id": image_id})
            return None
        logger.debug("image cache hit", extra={"image_id": image_id})
        content_type = raw.get(b"content_type", b"application/octet-stream").decode()
        return CachedImage(data=raw[b"data"], content_type=content_type)

    async def put(
        self, data: bytes, content_type: str, ttl: int | None = None
    ) -> str | None:
        """Store *data* under a new id with a TTL. Returns the id, or ``None`` on error."""
        image_id = _generate_image_id()
        key = f"{KEY_PREFIX}{image_id}"
        effective_ttl = ttl if ttl is not None else self._default_ttl
        try:
            # Write and TTL go out as one transaction so no key is left without expiry
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.hset(key, mapping={"content_type": content_type, "data": data})
                pipe.expire(key, effective_ttl)
                await pipe.execute()
        except redis.RedisError:
            logger.warning("image cache put failed", extra={"bytes": len(data)}, exc_info=True)
            return None
        logger.debug(
            "image cached",
            extra={"image_id": image_id, "bytes": len(data), "ttl": effective_ttl},
        )
        return image_id


async def create_redis_client(redis_url: str) -> redis.Redis:
    # Strip credentials for logging (everything before @ if present)
    safe_url = redis_url.split("@")[-1] if "@" in redis_url else redis_url
    logger.info("connecting to redis", extra={"redis_url": safe_url})
    retry = Retry(ExponentialBackoff(), retries=3)
    return redis.from_url(
        redis_url,
        decode_responses=False,
        socket_connect_timeout=5,
        socket_timeout=5,
        health_check_interval=30,
        retry=retry,
        retry_on_error=[redis.ConnectionError, redis.TimeoutError],
    )
