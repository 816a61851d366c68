"""
Order Repository Interface.
Defines specific data access operations for Orders.
"""

from typing import List

from mb_feedback.domain.repositories.base import BaseRepository
from mb_feedback.domain.models.order import Order
from mb_feedback.domain.schemas.order import OrderListParams


class OrderRepository(BaseRepository[Order]):
    """Interface for Order-specific operations."""

    def list_without_details(self, params: OrderListParams) -> List[Order]:
        """Get orders that have no order detail rows yet."""
        ...
