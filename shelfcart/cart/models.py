"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from shelfcart.services.money import parse_money, round_money, multiply, validate_price


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class CartItem:
    """Single line in the cart. At most one per book_id."""
    book_id: str
    title: str
    quantity: int
    price: Decimal  # Unit price at time of add

    def __post_init__(self):
        self.price = parse_money(self.price)

    @property
    def subtotal(self) -> Decimal:
        """Price for all units."""
        return round_money(multiply(self.price, self.quantity))

    def copy(self) -> "CartItem":
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to the persisted layout."""
        return {
            "bookId": self.book_id,
            "title": self.title,
            "quantity": self.quantity,
            "price": str(self.price),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        """Create from the persisted layout."""
        return cls(
            book_id=str(data["bookId"]),
            title=data.get("title") or "",
            quantity=int(data["quantity"]),
            price=validate_price(data["price"]),
        )


@dataclass
class Cart:
    """Shopping cart of a single user."""
    user_id: str
    items: List[CartItem] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        now = _utcnow()
        if not self.created_at:
            self.created_at = now
        if not self.updated_at:
            self.updated_at = now

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_items(self) -> int:
        """Total number of units in cart."""
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> Decimal:
        return round_money(sum((item.subtotal for item in self.items), Decimal("0")))

    def find_item(self, book_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.book_id == book_id), None)

    def add_item(self, item: CartItem) -> None:
        """Merge into an existing line for the same book, else append a copy."""
        existing = self.find_item(item.book_id)
        if existing:
            existing.quantity += item.quantity
            return
        self.items.append(item.copy())

    def remove_item(self, book_id: str) -> bool:
        """Drop every line for book_id. Returns True if anything was removed."""
        before = len(self.items)
        self.items = [item for item in self.items if item.book_id != book_id]
        return len(self.items) != before

    def touch(self) -> None:
        self.updated_at = _utcnow()

    def to_dict(self) -> dict:
        """Convert to dictionary for Redis storage."""
        return {
            "userId": self.user_id,
            "items": [item.to_dict() for item in self.items],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Cart":
        """Create from dictionary."""
        items = [CartItem.from_dict(item) for item in data.get("items") or []]
        return cls(
            user_id=str(data["userId"]),
            items=items,
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )
