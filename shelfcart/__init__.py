"""
shelfcart - bookstore shopping cart service

Packages:
- cart: cart model, Redis/in-memory stores, CartManager
- clients: stock-check and order-service adapters
- routers: FastAPI cart endpoints
"""

__version__ = "1.0.0"
