"""Order Service Client - submits a finalized cart as an order."""

import os
from typing import List, Optional

import httpx

from shelfcart.errors import SubmitterUnreachable
from shelfcart.logging import get_logger, loggable
from .base import OrderOutcome, OrderRequest

logger = get_logger(__name__)

DEFAULT_ORDER_SERVICE_URL = "http://order-service.cloudshelf.svc.cluster.local:8082"


def _parse_json(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return None


class HttpOrderSubmitter:
    """Places orders with the order service: POST /api/order"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or os.environ.get("ORDER_SERVICE_URL", DEFAULT_ORDER_SERVICE_URL)).rstrip("/")
        self.timeout = timeout if timeout is not None else float(os.environ.get("ORDER_SERVICE_TIMEOUT", "10.0"))

        # HTTP client (lazy init)
        self._http_client: httpx.AsyncClient | None = client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def submit(self, request: OrderRequest) -> OrderOutcome:
        client = await self._get_http_client()
        url = f"{self.base_url}/api/order"
        user = loggable(request.user_id)

        try:
            response = await client.post(url, json=request.to_dict())
        except httpx.TimeoutException as e:
            logger.warning("Order service timed out for user %s", user)
            raise SubmitterUnreachable("Order service timed out") from e
        except httpx.RequestError as e:
            logger.warning("Order service unreachable for user %s: %s", user, e)
            raise SubmitterUnreachable(f"Failed to connect to order service: {e!s}") from e

        logger.info("Order service response status: %s for user %s", response.status_code, user)

        if response.status_code >= 500:
            raise SubmitterUnreachable(f"Order service error: HTTP {response.status_code}")

        data = _parse_json(response)

        if response.status_code >= 400:
            # Rejected by the service; never a success whatever the body says
            message = data.get("message") if isinstance(data, dict) else None
            return OrderOutcome.failure(message or f"Order service returned HTTP {response.status_code}")

        return OrderOutcome.from_response(data)


class InMemoryOrderSubmitter:
    """Answers every submission with a fixed outcome and records the requests."""

    def __init__(self, outcome: Optional[OrderOutcome] = None, unreachable: bool = False):
        self.outcome = outcome or OrderOutcome.success("Order placed successfully")
        self.unreachable = unreachable
        self.requests: List[OrderRequest] = []

    async def submit(self, request: OrderRequest) -> OrderOutcome:
        self.requests.append(request)
        if self.unreachable:
            raise SubmitterUnreachable()
        return self.outcome
