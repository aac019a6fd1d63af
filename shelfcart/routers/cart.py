"""
Cart Router

Per-user cart endpoints. Failures are reported as
{"detail": {"error": kind, "message": ..., "retryable": bool}} so clients can
tell input/inventory problems from unavailable dependencies.
"""
from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import PlainTextResponse

from shelfcart.cart import Cart, CartItem, CartManager
from shelfcart.errors import CartError, DependencyUnavailable
from shelfcart.logging import get_logger
from shelfcart.services.money import to_float
from .deps import get_cart_manager_lazy
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _format_cart_response(cart: Cart) -> dict:
    """Cart document with derived totals."""
    return {
        "userId": cart.user_id,
        "items": [
            {
                "bookId": item.book_id,
                "title": item.title,
                "quantity": item.quantity,
                "price": to_float(item.price),
                "subtotal": to_float(item.subtotal),
            }
            for item in cart.items
        ],
        "totalItems": cart.total_items,
        "totalPrice": to_float(cart.total_price),
        "createdAt": cart.created_at,
        "updatedAt": cart.updated_at,
    }


def _http_error(error: CartError) -> HTTPException:
    if isinstance(error, DependencyUnavailable):
        logger.warning("Cart request failed on dependency: %s", error.kind)
    return HTTPException(status_code=error.status_code, detail=error.to_dict())


@router.get("/{user_id}")
async def get_cart(user_id: str, cart_manager: CartManager = Depends(get_cart_manager_lazy)):
    """Get user's cart (empty when none is stored)."""
    try:
        cart = await cart_manager.get_cart(user_id)
    except CartError as e:
        raise _http_error(e) from e
    return _format_cart_response(cart)


@router.post("/{user_id}/add")
async def add_to_cart(
    user_id: str,
    request: AddToCartRequest,
    cart_manager: CartManager = Depends(get_cart_manager_lazy),
):
    """Add item to cart after checking stock."""
    item = CartItem(
        book_id=request.book_id,
        title=request.title,
        quantity=request.quantity,
        price=request.price,
    )
    try:
        cart = await cart_manager.add_item(user_id, item)
    except CartError as e:
        raise _http_error(e) from e
    return _format_cart_response(cart)


@router.patch("/{user_id}/items/{book_id}")
async def update_cart_item(
    user_id: str,
    book_id: str,
    request: UpdateCartItemRequest,
    cart_manager: CartManager = Depends(get_cart_manager_lazy),
):
    """Update cart item quantity (0 = remove)."""
    try:
        cart = await cart_manager.update_item_quantity(user_id, book_id, request.quantity)
    except CartError as e:
        raise _http_error(e) from e
    return _format_cart_response(cart)


@router.delete("/{user_id}/remove/{book_id}")
async def remove_cart_item(
    user_id: str,
    book_id: str,
    cart_manager: CartManager = Depends(get_cart_manager_lazy),
):
    """Remove item from cart."""
    try:
        cart = await cart_manager.remove_item(user_id, book_id)
    except CartError as e:
        raise _http_error(e) from e
    return _format_cart_response(cart)


@router.delete("/{user_id}/clear", status_code=204)
async def clear_cart(user_id: str, cart_manager: CartManager = Depends(get_cart_manager_lazy)):
    try:
        await cart_manager.clear_cart(user_id)
    except CartError as e:
        raise _http_error(e) from e
    return Response(status_code=204)


@router.post("/{user_id}/checkout", response_class=PlainTextResponse)
async def checkout(user_id: str, cart_manager: CartManager = Depends(get_cart_manager_lazy)):
    """Place an order for the cart; the cart is cleared only on success."""
    try:
        message = await cart_manager.checkout(user_id)
    except CartError as e:
        raise _http_error(e) from e
    return PlainTextResponse(message)
