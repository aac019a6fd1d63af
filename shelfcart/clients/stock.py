"""Stock Check Client - availability of a book/quantity pair."""

import os
from typing import Dict, List, Optional, Tuple

import httpx

from shelfcart.errors import VerifierUnreachable
from shelfcart.logging import get_logger, loggable
from .base import StockCheckResult

logger = get_logger(__name__)

DEFAULT_STOCK_CHECK_URL = "http://stock-check-service.cloudshelf.svc.cluster.local:8083"


class HttpStockVerifier:
    """Queries the stock-check service: GET /api/stock/check?bookId=&quantity="""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or os.environ.get("STOCK_CHECK_SERVICE_URL", DEFAULT_STOCK_CHECK_URL)).rstrip("/")
        self.timeout = timeout if timeout is not None else float(os.environ.get("STOCK_CHECK_TIMEOUT", "5.0"))

        # HTTP client (lazy init)
        self._http_client: httpx.AsyncClient | None = client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 3.0)),
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def check(self, book_id: str, quantity: int) -> StockCheckResult:
        client = await self._get_http_client()
        url = f"{self.base_url}/api/stock/check"

        try:
            response = await client.get(url, params={"bookId": book_id, "quantity": quantity})
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning("Stock check timed out for book %s", loggable(book_id))
            raise VerifierUnreachable("Stock check service timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Stock check service returned HTTP %s for book %s",
                e.response.status_code, loggable(book_id),
            )
            raise VerifierUnreachable(
                f"Stock check service error: HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.warning("Stock check service unreachable: %s", e)
            raise VerifierUnreachable(f"Failed to connect to stock check service: {e!s}") from e

        try:
            data = response.json()
        except ValueError:
            logger.warning("Stock check returned a non-JSON body for book %s", loggable(book_id))
            data = None

        return StockCheckResult.from_response(book_id, data)


class InMemoryStockVerifier:
    """Stock levels held in a dict. Records every check."""

    def __init__(self, stock: Optional[Dict[str, int]] = None, unreachable: bool = False):
        self.stock: Dict[str, int] = dict(stock or {})
        self.unreachable = unreachable
        self.calls: List[Tuple[str, int]] = []

    async def check(self, book_id: str, quantity: int) -> StockCheckResult:
        self.calls.append((book_id, quantity))
        if self.unreachable:
            raise VerifierUnreachable()

        available = self.stock.get(book_id, 0)
        return StockCheckResult(
            book_id=book_id,
            in_stock=available >= quantity,
            available_quantity=available,
        )
