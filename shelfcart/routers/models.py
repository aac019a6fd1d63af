"""
Cart API Pydantic Models

Request bodies use the camelCase field names of the cart document.
"""
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class AddToCartRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    book_id: str = Field(alias="bookId")
    title: str = ""
    quantity: int = 1
    price: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)


class UpdateCartItemRequest(BaseModel):
    quantity: int  # 0 removes the line
