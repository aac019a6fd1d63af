"""Cart persistence: Redis-backed store and an in-process store for tests/local runs."""
import asyncio
import json
from typing import Dict, Optional, Protocol

from shelfcart.db import get_redis, RedisKeys, TTL, STORE_TIMEOUT
from shelfcart.errors import StoreUnavailable
from shelfcart.logging import get_logger, loggable
from .models import Cart

logger = get_logger(__name__)


class CartStore(Protocol):
    """Key-value persistence of one cart document per user."""

    async def load(self, user_id: str) -> Cart:
        """Stored cart, or a new empty cart when none exists."""
        ...

    async def save(self, user_id: str, cart: Cart) -> None:
        ...

    async def delete(self, user_id: str) -> None:
        ...


def encode_cart(cart: Cart) -> str:
    return json.dumps(cart.to_dict())


def decode_cart(raw: str, user_id: str) -> Cart:
    """
    Parse a stored document.

    Raises:
        ValueError: document is not a valid cart
    """
    try:
        data = json.loads(raw)
        cart = Cart.from_dict(data)
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Corrupted cart document: {e}") from e
    # Key is the record of truth for ownership
    cart.user_id = user_id
    return cart


class RedisCartStore:
    """
    Stores carts in Redis under cart:{user_id}.

    Every round-trip is bounded by `timeout`; a timeout or client error is
    reported as StoreUnavailable.
    """

    def __init__(self, redis=None, timeout: float = STORE_TIMEOUT, ttl: int = TTL.CART):
        self._redis = redis  # Lazy initialization
        self.timeout = timeout
        self.ttl = ttl

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def _call(self, action: str, user_id: str, make_call):
        try:
            return await asyncio.wait_for(make_call(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(
                "Redis %s timed out after %.1fs for user %s",
                action, self.timeout, loggable(user_id),
            )
            raise StoreUnavailable(f"Cart store timed out during {action}") from e
        except Exception as e:
            logger.error(
                "Redis %s failed for user %s: %s",
                action, loggable(user_id), e,
            )
            raise StoreUnavailable(f"Cart store unavailable: {e}") from e

    async def load(self, user_id: str) -> Cart:
        key = RedisKeys.cart_key(user_id)
        raw = await self._call("get", user_id, lambda: self.redis.get(key))

        if not raw:
            return Cart(user_id=user_id)

        try:
            return decode_cart(raw, user_id)
        except ValueError as e:
            # Corrupted data - clear it and start over. The only write a read
            # ever makes: the next load sees an empty cart.
            logger.warning("Corrupted cart data for user %s: %s", loggable(user_id), e)
            await self.delete(user_id)
            return Cart(user_id=user_id)

    async def save(self, user_id: str, cart: Cart) -> None:
        key = RedisKeys.cart_key(user_id)
        payload = encode_cart(cart)
        ex = self.ttl if self.ttl > 0 else None
        await self._call("set", user_id, lambda: self.redis.set(key, payload, ex=ex))

    async def delete(self, user_id: str) -> None:
        key = RedisKeys.cart_key(user_id)
        await self._call("delete", user_id, lambda: self.redis.delete(key))


class InMemoryCartStore:
    """
    Process-local store. Keeps serialized documents so callers never share
    mutable Cart objects with the store.
    """

    def __init__(self, documents: Optional[Dict[str, str]] = None):
        self.documents: Dict[str, str] = documents if documents is not None else {}

    async def load(self, user_id: str) -> Cart:
        raw = self.documents.get(RedisKeys.cart_key(user_id))
        if raw is None:
            return Cart(user_id=user_id)
        try:
            return decode_cart(raw, user_id)
        except ValueError as e:
            # Same as Redis: a corrupt document is deleted on read
            logger.warning("Corrupted cart data for user %s: %s", loggable(user_id), e)
            await self.delete(user_id)
            return Cart(user_id=user_id)

    async def save(self, user_id: str, cart: Cart) -> None:
        self.documents[RedisKeys.cart_key(user_id)] = encode_cart(cart)

    async def delete(self, user_id: str) -> None:
        self.documents.pop(RedisKeys.cart_key(user_id), None)


__all__ = [
    "CartStore",
    "RedisCartStore",
    "InMemoryCartStore",
    "encode_cart",
    "decode_cart",
]
