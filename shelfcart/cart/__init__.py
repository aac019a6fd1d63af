"""Cart package: models, storage, and manager facade."""
from .models import CartItem, Cart
from .service import CartManager, get_cart_manager, close_cart_manager
from .storage import CartStore, InMemoryCartStore, RedisCartStore

__all__ = [
    "CartItem",
    "Cart",
    "CartManager",
    "CartStore",
    "InMemoryCartStore",
    "RedisCartStore",
    "get_cart_manager",
    "close_cart_manager",
]
