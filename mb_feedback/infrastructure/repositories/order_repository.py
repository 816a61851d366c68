"""
SQLAlchemy Implementation of Order Repository.
"""

from typing import List

from sqlalchemy.orm import Query

from mb_feedback.domain.models.order import Order
from mb_feedback.domain.models.order_detail import OrderDetail
from mb_feedback.domain.repositories.order_repository import OrderRepository
from mb_feedback.domain.schemas.order import OrderGetParams, OrderListParams
from mb_feedback.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyOrderRepository(SQLAlchemyRepository[Order], OrderRepository):
    """Order repository implementation using SQLAlchemy."""

    def _apply_get_filters(self, query: Query, params: OrderGetParams) -> Query:
        if params.id is not None:
            query = query.filter(Order.id == params.id)
        if params.external_order_id is not None:
            query = query.filter(Order.external_order_id == params.external_order_id)
        if params.user_phone is not None:
            query = query.filter(Order.user_phone == params.user_phone)
        return query

    def _apply_list_filters(self, query: Query, params: OrderListParams) -> Query:
        if params.id is not None:
            query = query.filter(Order.id == params.id)
        if params.ids is not None:
            query = query.filter(Order.id.in_(params.ids))
        if params.external_order_id is not None:
            query = query.filter(Order.external_order_id == params.external_order_id)
        if params.external_order_ids is not None:
            query = query.filter(Order.external_order_id.in_(params.external_order_ids))
        if params.user_phone is not None:
            query = query.filter(Order.user_phone == params.user_phone)
        if params.user_phones is not None:
            query = query.filter(Order.user_phone.in_(params.user_phones))
        if params.created_before is not None:
            query = query.filter(Order.created_at <= params.created_before)
        if params.created_after is not None:
            query = query.filter(Order.created_at >= params.created_after)
        return query

    def list_without_details(self, params: OrderListParams) -> List[Order]:
        """Get orders with no order_details rows (left anti-join)."""
        query = (
            self.db.query(Order)
            .outerjoin(OrderDetail, OrderDetail.order_id == Order.id)
            .filter(OrderDetail.id.is_(None))
        )
        if params.created_after is not None:
            query = query.filter(Order.created_at >= params.created_after)
        return query.order_by(Order.id).all()
