"""
Cart Error Kinds

Every failure the cart core reports is one of these exceptions.
`kind` is the stable machine-readable name, `status_code` the HTTP mapping,
`retryable` tells the client whether trying again may help.
"""

# Fixed messages
ERROR_EMPTY_CART = "Cart is empty. Cannot checkout."
ERROR_INVALID_ORDER_RESPONSE = "Invalid order-service response."
ERROR_STORE_UNAVAILABLE = "Cart store unavailable"
ERROR_VERIFIER_UNREACHABLE = "Stock check service unreachable"
ERROR_SUBMITTER_UNREACHABLE = "Order service unreachable"


class CartError(Exception):
    """Base class for all cart failures."""

    kind = "cart_error"
    status_code = 500
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message, "retryable": self.retryable}


# ==================== USER-CORRECTABLE ====================

class InvalidCartItem(CartError):
    kind = "invalid_item"
    status_code = 400


class OutOfStock(CartError):
    """Requested quantity is not available."""

    kind = "out_of_stock"
    status_code = 409

    def __init__(self, book_id: str, available_quantity: int = 0):
        super().__init__(f"Item not in stock: {book_id}")
        self.book_id = book_id
        self.available_quantity = available_quantity

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["book_id"] = self.book_id
        data["available_quantity"] = self.available_quantity
        return data


class EmptyCart(CartError):
    kind = "empty_cart"
    status_code = 400

    def __init__(self, message: str = ERROR_EMPTY_CART):
        super().__init__(message)


class OrderRejected(CartError):
    """Order service answered with a non-success status."""

    kind = "order_rejected"
    status_code = 422


# ==================== DEPENDENCY FAILURES ====================

class DependencyUnavailable(CartError):
    """A collaborator could not be reached or timed out."""

    kind = "dependency_unavailable"
    status_code = 503
    retryable = True


class VerifierUnreachable(DependencyUnavailable):
    kind = "verifier_unreachable"
    status_code = 502

    def __init__(self, message: str = ERROR_VERIFIER_UNREACHABLE):
        super().__init__(message)


class SubmitterUnreachable(DependencyUnavailable):
    kind = "submitter_unreachable"
    status_code = 502

    def __init__(self, message: str = ERROR_SUBMITTER_UNREACHABLE):
        super().__init__(message)


class StoreUnavailable(DependencyUnavailable):
    kind = "store_unavailable"
    status_code = 503

    def __init__(self, message: str = ERROR_STORE_UNAVAILABLE):
        super().__init__(message)


class CartNotCleared(StoreUnavailable):
    """
    Order was placed but the cart could not be deleted afterwards.

    Not retryable: checking out again would submit a second order.
    """

    kind = "cart_not_cleared"
    status_code = 500
    retryable = False


__all__ = [
    "CartError",
    "InvalidCartItem",
    "OutOfStock",
    "EmptyCart",
    "OrderRejected",
    "DependencyUnavailable",
    "VerifierUnreachable",
    "SubmitterUnreachable",
    "StoreUnavailable",
    "CartNotCleared",
    "ERROR_EMPTY_CART",
    "ERROR_INVALID_ORDER_RESPONSE",
]
