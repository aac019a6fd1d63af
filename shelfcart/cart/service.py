"""Cart manager: stock-checked mutations and the checkout protocol."""
import os
from typing import Optional

from shelfcart.clients.base import OrderOutcome, OrderRequest, OrderSubmitter, StockCheckResult, StockVerifier
from shelfcart.errors import (
    CartError,
    CartNotCleared,
    EmptyCart,
    InvalidCartItem,
    OrderRejected,
    OutOfStock,
    StoreUnavailable,
    SubmitterUnreachable,
    VerifierUnreachable,
)
from shelfcart.logging import get_logger, loggable
from shelfcart.services.money import MAX_PRICE, validate_price
from .models import Cart, CartItem
from .storage import CartStore, InMemoryCartStore, RedisCartStore

logger = get_logger(__name__)


def _validate_item(item: CartItem) -> None:
    if not isinstance(item.book_id, str) or not item.book_id.strip():
        raise InvalidCartItem("bookId must be a non-empty string")
    if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity < 1:
        raise InvalidCartItem("quantity must be a positive integer")
    try:
        validate_price(item.price)
    except ValueError as e:
        raise InvalidCartItem(f"price must be a non-negative amount of at most {MAX_PRICE} in whole cents") from e


class CartManager:
    """
    Orchestrates a user's cart across the store, the stock verifier and the
    order submitter.

    Every operation is a load-modify-save against the store; concurrent
    writers for the same user are last-writer-wins.

    Guarantees:
    - An item is only persisted after the stock verifier reports it in stock
    - At most one line per book_id (adds merge quantities)
    - The cart is cleared if and only if the order service reports success
    """

    def __init__(self, store: CartStore, stock_verifier: StockVerifier, order_submitter: OrderSubmitter):
        self.store = store
        self.stock_verifier = stock_verifier
        self.order_submitter = order_submitter

    # ==================== COLLABORATOR CALLS ====================

    async def _load(self, user_id: str) -> Cart:
        try:
            return await self.store.load(user_id)
        except CartError:
            raise
        except Exception as e:
            logger.error("Failed to load cart for user %s: %s", loggable(user_id), e)
            raise StoreUnavailable(f"Cart store unavailable: {e}") from e

    async def _save(self, user_id: str, cart: Cart) -> None:
        cart.touch()
        try:
            await self.store.save(user_id, cart)
        except CartError:
            raise
        except Exception as e:
            logger.error("Failed to save cart for user %s: %s", loggable(user_id), e)
            raise StoreUnavailable(f"Cart store unavailable: {e}") from e

    async def _delete(self, user_id: str) -> None:
        try:
            await self.store.delete(user_id)
        except CartError:
            raise
        except Exception as e:
            logger.error("Failed to delete cart for user %s: %s", loggable(user_id), e)
            raise StoreUnavailable(f"Cart store unavailable: {e}") from e

    async def _check_stock(self, book_id: str, quantity: int) -> StockCheckResult:
        try:
            result = await self.stock_verifier.check(book_id, quantity)
        except CartError:
            raise
        except Exception as e:
            logger.exception("Stock check failed for book %s", loggable(book_id))
            raise VerifierUnreachable(f"Stock check failed: {e}") from e

        if result is None or result.in_stock is not True:
            available = result.available_quantity if result is not None else 0
            logger.info(
                "Rejected book %s: requested %s, available %s",
                loggable(book_id), quantity, available,
            )
            raise OutOfStock(book_id, available)
        return result

    async def _submit(self, request: OrderRequest) -> OrderOutcome:
        try:
            return await self.order_submitter.submit(request)
        except CartError:
            raise
        except Exception as e:
            logger.exception("Order submission failed for user %s", loggable(request.user_id))
            raise SubmitterUnreachable(f"Order submission failed: {e}") from e

    # ==================== OPERATIONS ====================

    async def get_cart(self, user_id: str) -> Cart:
        """User's cart; an empty cart when none is stored. A corrupt stored document is deleted."""
        return await self._load(user_id)

    async def add_item(self, user_id: str, item: CartItem) -> Cart:
        """
        Add item to cart after a stock check for the requested quantity.

        Raises:
            InvalidCartItem, OutOfStock, VerifierUnreachable: cart not touched
            StoreUnavailable: load or save failed
        """
        _validate_item(item)
        await self._check_stock(item.book_id, item.quantity)

        cart = await self._load(user_id)
        cart.add_item(item)
        await self._save(user_id, cart)
        return cart

    async def update_item_quantity(self, user_id: str, book_id: str, quantity: int) -> Cart:
        """
        Set the quantity of a line already in the cart (0 = remove).

        The new absolute quantity is stock-checked. A book that is not in the
        cart leaves the cart unchanged.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise InvalidCartItem("quantity must be a non-negative integer")
        if quantity == 0:
            return await self.remove_item(user_id, book_id)

        cart = await self._load(user_id)
        existing = cart.find_item(book_id)
        if existing is None or existing.quantity == quantity:
            return cart

        await self._check_stock(book_id, quantity)
        existing.quantity = quantity
        await self._save(user_id, cart)
        return cart

    async def remove_item(self, user_id: str, book_id: str) -> Cart:
        """Remove a book from the cart. Absent books are not an error."""
        cart = await self._load(user_id)
        if not cart.remove_item(book_id):
            return cart

        if cart.is_empty:
            await self._delete(user_id)
        else:
            await self._save(user_id, cart)
        return cart

    async def clear_cart(self, user_id: str) -> None:
        """Delete the stored cart. Idempotent."""
        await self._delete(user_id)

    async def checkout(self, user_id: str) -> str:
        """
        Submit the cart as an order.

        Returns:
            The order service's message

        Raises:
            EmptyCart: nothing to order (no submission, no store write)
            OrderRejected: order service answered with a non-success status
            SubmitterUnreachable: order service unreachable or timed out
            StoreUnavailable: cart could not be loaded
            CartNotCleared: order placed but the cart could not be deleted
        """
        user = loggable(user_id)
        cart = await self._load(user_id)
        if cart.is_empty:
            raise EmptyCart()

        request = OrderRequest.from_cart(cart)
        outcome = await self._submit(request)

        if not outcome.succeeded:
            logger.warning(
                "Order rejected for user %s: %s", user, loggable(outcome.message, limit=50)
            )
            raise OrderRejected(outcome.message)

        try:
            await self._delete(user_id)
        except StoreUnavailable as e:
            logger.error("Order placed for user %s but cart was not cleared", user)
            raise CartNotCleared(f"Order placed but cart could not be cleared: {e.message}") from e

        logger.info("Checkout complete for user %s (%s line items)", user, len(request.line_items))
        return outcome.message


# Singleton instance
_cart_manager: Optional[CartManager] = None


def _default_store() -> CartStore:
    backend = os.environ.get("CART_BACKEND", "redis").lower()
    if backend == "memory":
        return InMemoryCartStore()
    return RedisCartStore()


def get_cart_manager() -> CartManager:
    """Get CartManager singleton wired to the configured backends."""
    global _cart_manager
    if _cart_manager is None:
        from shelfcart.clients import HttpOrderSubmitter, HttpStockVerifier

        _cart_manager = CartManager(
            store=_default_store(),
            stock_verifier=HttpStockVerifier(),
            order_submitter=HttpOrderSubmitter(),
        )
    return _cart_manager


async def close_cart_manager() -> None:
    """Release HTTP clients held by the singleton's adapters."""
    global _cart_manager
    if _cart_manager is None:
        return

    for adapter in (_cart_manager.stock_verifier, _cart_manager.order_submitter):
        aclose = getattr(adapter, "aclose", None)
        if aclose is not None:
            await aclose()
    _cart_manager = None
