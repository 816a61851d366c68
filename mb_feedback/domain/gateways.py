"""
External system interfaces.
The pipeline only sees these contracts; HTTP clients live in infrastructure.
"""

from typing import List, Protocol

from mb_feedback.domain.schemas.order import FetchedOrder


class OrderFetcher(Protocol):
    """Source of completed orders and their product codes."""

    async def fetch_completed_orders(self) -> List[FetchedOrder]:
        """Fetch every currently completed order (pagination is internal)."""
        ...

    async def fetch_product_codes(self, external_order_id: str) -> List[str]:
        """Fetch the product codes of a single order."""
        ...


class Notifier(Protocol):
    """Sends one templated feedback request."""

    async def send_notification(
        self, order_id: str, user_phone: str, user_name: str, product_code: str
    ) -> None:
        """Send the message; any exception means the send failed."""
        ...
