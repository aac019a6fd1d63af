"""
Shared Dependencies for Routers

Lazy-loaded singletons; tests replace them through app.dependency_overrides.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from shelfcart.cart import CartManager


_cart_manager: Optional["CartManager"] = None


def get_cart_manager_lazy() -> "CartManager":
    """Get or create CartManager singleton (lazy loaded)"""
    global _cart_manager
    if _cart_manager is None:
        from shelfcart.cart import get_cart_manager
        _cart_manager = get_cart_manager()
    return _cart_manager


async def shutdown_dependencies() -> None:
    """Close clients opened by the singletons."""
    global _cart_manager
    from shelfcart.cart import close_cart_manager
    from shelfcart.db import close_redis

    await close_cart_manager()
    await close_redis()
    _cart_manager = None
