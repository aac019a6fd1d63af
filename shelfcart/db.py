"""
Database Module - Redis Client

Provides the singleton async Upstash Redis client that backs cart storage,
plus the key layout and expiry settings for cart documents.
"""

import os
from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis


# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Raises:
        ValueError: UPSTASH_REDIS_REST_URL / UPSTASH_REDIS_REST_TOKEN not set
    """
    global _redis_client

    if _redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


async def close_redis() -> None:
    """Release the client's HTTP session, if one was created."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.close()
        _redis_client = None


class RedisKeys:
    """Redis key prefixes."""

    CART = "cart:"  # cart:{user_id}

    @staticmethod
    def cart_key(user_id: str) -> str:
        return f"{RedisKeys.CART}{user_id}"


class TTL:
    """Time-to-live settings for Redis keys (seconds)."""

    # 0 keeps carts until checkout or explicit clear
    CART = int(os.environ.get("CART_TTL_SECONDS", "0"))


# Per-call bound on Redis round-trips (seconds)
STORE_TIMEOUT = float(os.environ.get("CART_STORE_TIMEOUT", "5.0"))
