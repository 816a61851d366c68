"""MB broker HTTP client.

Source of completed marketplace orders and of the product codes per order.
Errors are not retried here; a failed stage is simply triggered again later.
"""

import logging
from typing import Any, List, Optional

import httpx

from mb_feedback.config import get_settings
from mb_feedback.core.exceptions import BadStatusCodeError
from mb_feedback.domain.schemas.order import FetchedOrder

settings = get_settings()
logger = logging.getLogger(__name__)

COMPLETED_STATUS = "COMPLETED"


class BrokerAPIClient:
    """Client for the MB broker order API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        provider_id: Optional[str] = None,
        page_size: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.BROKER_API_URL).rstrip("/")
        self.token = token if token is not None else settings.BROKER_API_TOKEN
        self.provider_id = provider_id or settings.BROKER_PROVIDER_ID
        self.page_size = page_size or settings.BROKER_PAGE_SIZE
        self.headers = {"Authorization": f"Bearer {self.token}"}
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT, transport=self._transport)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        async with self._client() as client:
            response = await client.request(method, url, headers=self.headers, **kwargs)

        if response.status_code != httpx.codes.OK:
            logger.error(f"Broker API {method} {path} failed: {response.status_code} - {response.text[:200]}")
            raise BadStatusCodeError("mb-broker", response.status_code, response.text)

        return response.json()

    async def fetch_completed_orders(self) -> List[FetchedOrder]:
        """Fetch all completed orders, following the broker's pagination."""
        orders: List[FetchedOrder] = []
        page = 1

        while True:
            payload = await self._request(
                "GET",
                "/ord",
                params={
                    "prv_id": self.provider_id,
                    "status": COMPLETED_STATUS,
                    "page": page,
                    "page_size": self.page_size,
                },
            )
            results = payload.get("results") or []
            for item in results:
                customer = item.get("customer") or {}
                orders.append(
                    FetchedOrder(
                        external_order_id=item["prv_code"],
                        user_phone=customer.get("cell_phone") or "",
                        user_name=customer.get("first_name") or "",
                    )
                )

            total_count = payload.get("total_count") or 0
            page_size = payload.get("page_size") or self.page_size
            if not results or page * page_size >= total_count:
                break
            page += 1

        logger.info(f"Fetched {len(orders)} completed orders from broker ({page} page(s))")
        return orders

    async def fetch_product_codes(self, external_order_id: str) -> List[str]:
        """Fetch the product codes of one order."""
        codes = await self._request(
            "POST",
            "/ord/product_codes",
            json={"prv_code": external_order_id},
        )
        return [str(code) for code in codes or []]
