"""
SQLAlchemy Implementation of OrderDetail Repository.
"""

from typing import List

from sqlalchemy import exists
from sqlalchemy.orm import Query

from mb_feedback.domain.models.notification import Notification
from mb_feedback.domain.models.order import Order
from mb_feedback.domain.models.order_detail import OrderDetail
from mb_feedback.domain.repositories.order_detail_repository import OrderDetailRepository
from mb_feedback.domain.schemas.order_detail import (
    OrderDetailGetParams,
    OrderDetailListParams,
    OrderDetailWithUserInfo,
)
from mb_feedback.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyOrderDetailRepository(SQLAlchemyRepository[OrderDetail], OrderDetailRepository):
    """OrderDetail repository implementation using SQLAlchemy."""

    def _apply_get_filters(self, query: Query, params: OrderDetailGetParams) -> Query:
        if params.id is not None:
            query = query.filter(OrderDetail.id == params.id)
        if params.order_id is not None:
            query = query.filter(OrderDetail.order_id == params.order_id)
        if params.product_code is not None:
            query = query.filter(OrderDetail.product_code == params.product_code)
        return query

    def _apply_list_filters(self, query: Query, params: OrderDetailListParams) -> Query:
        if params.id is not None:
            query = query.filter(OrderDetail.id == params.id)
        if params.ids is not None:
            query = query.filter(OrderDetail.id.in_(params.ids))
        if params.order_id is not None:
            query = query.filter(OrderDetail.order_id == params.order_id)
        if params.order_ids is not None:
            query = query.filter(OrderDetail.order_id.in_(params.order_ids))
        if params.product_code is not None:
            query = query.filter(OrderDetail.product_code == params.product_code)
        if params.product_codes is not None:
            query = query.filter(OrderDetail.product_code.in_(params.product_codes))
        if params.created_before is not None:
            query = query.filter(OrderDetail.created_at <= params.created_before)
        if params.created_after is not None:
            query = query.filter(OrderDetail.created_at >= params.created_after)
        return query

    def list_without_notification(self, params: OrderDetailListParams) -> List[OrderDetailWithUserInfo]:
        """Get details lacking a notification row, with the order's contact info."""
        has_notification = exists().where(Notification.order_item_id == OrderDetail.id)

        query = (
            self.db.query(
                OrderDetail.id.label("id"),
                OrderDetail.product_code.label("product_code"),
                Order.external_order_id.label("order_id"),
                Order.user_phone.label("user_phone"),
                Order.user_name.label("user_name"),
            )
            .join(Order, OrderDetail.order_id == Order.id)
            .filter(~has_notification)
        )
        if params.created_after is not None:
            query = query.filter(OrderDetail.created_at >= params.created_after)

        rows = query.order_by(OrderDetail.id).all()
        return [OrderDetailWithUserInfo.model_validate(row) for row in rows]
