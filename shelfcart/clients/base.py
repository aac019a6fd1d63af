"""
Collaborator contracts: stock verification and order placement.

Both are single-operation capabilities. The cart manager depends only on
these protocols; HTTP adapters and in-memory doubles implement them.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, List, Protocol

from shelfcart.errors import ERROR_INVALID_ORDER_RESPONSE
from shelfcart.services.money import to_float


@dataclass(frozen=True)
class StockCheckResult:
    book_id: str
    in_stock: bool
    available_quantity: int = 0

    @classmethod
    def from_response(cls, book_id: str, data: Any) -> "StockCheckResult":
        """
        Parse a stock-service body.

        Fails closed: anything but a literal boolean true for inStock
        (missing, null, "true", 1, non-object body) means not in stock.
        """
        if not isinstance(data, dict):
            return cls(book_id=book_id, in_stock=False, available_quantity=0)

        in_stock = data.get("inStock") is True

        available = data.get("availableQuantity")
        if isinstance(available, bool) or not isinstance(available, int):
            available = 0

        return cls(book_id=book_id, in_stock=in_stock, available_quantity=available)


@dataclass(frozen=True)
class OrderLineItem:
    sku_code: str
    price: Decimal
    quantity: int

    def to_dict(self) -> dict:
        return {
            "skuCode": self.sku_code,
            "price": to_float(self.price),
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class OrderRequest:
    user_id: str
    line_items: List[OrderLineItem] = field(default_factory=list)

    @classmethod
    def from_cart(cls, cart) -> "OrderRequest":
        """Project a cart into an order payload (values copied)."""
        return cls(
            user_id=cart.user_id,
            line_items=[
                OrderLineItem(sku_code=item.book_id, price=item.price, quantity=item.quantity)
                for item in cart.items
            ],
        )

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "lineItems": [item.to_dict() for item in self.line_items],
        }


class OrderStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class OrderOutcome:
    status: OrderStatus
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is OrderStatus.SUCCESS

    @classmethod
    def success(cls, message: str = "") -> "OrderOutcome":
        return cls(status=OrderStatus.SUCCESS, message=message)

    @classmethod
    def failure(cls, message: str) -> "OrderOutcome":
        return cls(status=OrderStatus.FAILURE, message=message)

    @classmethod
    def from_response(cls, data: Any) -> "OrderOutcome":
        """
        Parse an order-service body.

        Status is compared case-insensitively; a body without a status is a
        failure, never a success.
        """
        if not isinstance(data, dict) or data.get("status") is None:
            return cls.failure(ERROR_INVALID_ORDER_RESPONSE)

        message = data.get("message")
        message = "" if message is None else str(message)

        if str(data["status"]).strip().lower() == OrderStatus.SUCCESS.value:
            return cls.success(message)
        return cls.failure(message)


class StockVerifier(Protocol):
    async def check(self, book_id: str, quantity: int) -> StockCheckResult:
        """
        Raises:
            VerifierUnreachable: service could not be reached or timed out
        """
        ...


class OrderSubmitter(Protocol):
    async def submit(self, request: OrderRequest) -> OrderOutcome:
        """
        Raises:
            SubmitterUnreachable: service could not be reached or timed out
        """
        ...
