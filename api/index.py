"""
shelfcart - Main FastAPI Application

Single entry point for the cart API.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shelfcart import __version__
from shelfcart.logging import get_logger
from shelfcart.routers import cart_router
from shelfcart.routers.deps import shutdown_dependencies

logger = get_logger(__name__)


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    logger.info("shelfcart %s starting", __version__)
    yield
    await shutdown_dependencies()


app = FastAPI(
    title="shelfcart",
    description="Bookstore shopping cart API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cart_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "shelfcart"}
