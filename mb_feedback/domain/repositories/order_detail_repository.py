"""
OrderDetail Repository Interface.
Defines specific data access operations for order details.
"""

from typing import List

from mb_feedback.domain.repositories.base import BaseRepository
from mb_feedback.domain.models.order_detail import OrderDetail
from mb_feedback.domain.schemas.order_detail import OrderDetailListParams, OrderDetailWithUserInfo


class OrderDetailRepository(BaseRepository[OrderDetail]):
    """Interface for OrderDetail-specific operations."""

    def list_without_notification(self, params: OrderDetailListParams) -> List[OrderDetailWithUserInfo]:
        """Get details with no notification row, joined with order contact info."""
        ...
