"""Clients for the stock-check and order services."""
from .base import (
    OrderLineItem,
    OrderOutcome,
    OrderRequest,
    OrderStatus,
    OrderSubmitter,
    StockCheckResult,
    StockVerifier,
)
from .orders import HttpOrderSubmitter, InMemoryOrderSubmitter
from .stock import HttpStockVerifier, InMemoryStockVerifier

__all__ = [
    "OrderLineItem",
    "OrderOutcome",
    "OrderRequest",
    "OrderStatus",
    "OrderSubmitter",
    "StockCheckResult",
    "StockVerifier",
    "HttpOrderSubmitter",
    "InMemoryOrderSubmitter",
    "HttpStockVerifier",
    "InMemoryStockVerifier",
]
