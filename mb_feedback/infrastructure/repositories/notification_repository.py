"""
SQLAlchemy Implementation of Notification Repository.
"""

from sqlalchemy.orm import Query

from mb_feedback.domain.models.notification import Notification
from mb_feedback.domain.repositories.notification_repository import NotificationRepository
from mb_feedback.domain.schemas.notification import NotificationGetParams, NotificationListParams
from mb_feedback.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyNotificationRepository(SQLAlchemyRepository[Notification], NotificationRepository):
    """Notification repository implementation using SQLAlchemy."""

    def _apply_get_filters(self, query: Query, params: NotificationGetParams) -> Query:
        if params.id is not None:
            query = query.filter(Notification.id == params.id)
        if params.order_item_id is not None:
            query = query.filter(Notification.order_item_id == params.order_item_id)
        if params.phone_number is not None:
            query = query.filter(Notification.phone_number == params.phone_number)
        if params.status is not None:
            query = query.filter(Notification.status == params.status)
        return query

    def _apply_list_filters(self, query: Query, params: NotificationListParams) -> Query:
        if params.id is not None:
            query = query.filter(Notification.id == params.id)
        if params.ids is not None:
            query = query.filter(Notification.id.in_(params.ids))
        if params.order_item_id is not None:
            query = query.filter(Notification.order_item_id == params.order_item_id)
        if params.order_item_ids is not None:
            query = query.filter(Notification.order_item_id.in_(params.order_item_ids))
        if params.phone_number is not None:
            query = query.filter(Notification.phone_number == params.phone_number)
        if params.phone_numbers is not None:
            query = query.filter(Notification.phone_number.in_(params.phone_numbers))
        if params.status is not None:
            query = query.filter(Notification.status == params.status)
        if params.statuses is not None:
            query = query.filter(Notification.status.in_(params.statuses))
        if params.sent_before is not None:
            query = query.filter(Notification.sent_at <= params.sent_before)
        if params.sent_after is not None:
            query = query.filter(Notification.sent_at >= params.sent_after)
        if params.created_before is not None:
            query = query.filter(Notification.created_at <= params.created_before)
        if params.created_after is not None:
            query = query.filter(Notification.created_at >= params.created_after)
        return query
