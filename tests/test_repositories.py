from datetime import datetime

import pytest
import pytz

from mb_feedback.core.exceptions import InvalidInputError, ObjectNotFoundError
from mb_feedback.domain.schemas.notification import (
    NotificationCreate,
    NotificationGetParams,
    NotificationListParams,
    NotificationRead,
    NotificationUpdate,
)
from mb_feedback.domain.schemas.order import OrderCreate, OrderGetParams, OrderListParams, OrderRead, OrderUpdate
from mb_feedback.domain.schemas.order_detail import (
    OrderDetailCreate,
    OrderDetailGetParams,
    OrderDetailListParams,
    OrderDetailRead,
)
from mb_feedback.infrastructure.repositories.base_repository import get_required


def test_create_and_get_order(order_repo):
    created = order_repo.create(OrderCreate(external_order_id="ORD1", user_phone="+77011234567", user_name="Anna"))

    fetched = order_repo.get(OrderGetParams(external_order_id="ORD1"))

    assert fetched.id == created.id
    assert fetched.created_at is not None


def test_get_without_filters_is_rejected(order_repo, detail_repo, notification_repo):
    with pytest.raises(InvalidInputError):
        order_repo.get(OrderGetParams())
    with pytest.raises(InvalidInputError):
        detail_repo.get(OrderDetailGetParams())
    with pytest.raises(InvalidInputError):
        notification_repo.get(NotificationGetParams())


def test_update_and_delete_without_filters_are_rejected(order_repo):
    order_repo.create(OrderCreate(external_order_id="ORD1", user_phone="+77011234567"))

    with pytest.raises(InvalidInputError):
        order_repo.update(OrderGetParams(), OrderUpdate(user_name="Anna"))
    with pytest.raises(InvalidInputError):
        order_repo.delete(OrderGetParams())

    _, count = order_repo.list(OrderListParams())
    assert count == 1


def test_get_required_raises_when_missing(order_repo):
    with pytest.raises(ObjectNotFoundError) as exc_info:
        get_required(order_repo, OrderGetParams(external_order_id="nope"))

    assert exc_info.value.status_code == 404


def test_list_filters_by_external_ids(order_repo):
    order_repo.create_batch(
        [
            OrderCreate(external_order_id="ORD1", user_phone="+77011234567"),
            OrderCreate(external_order_id="ORD2", user_phone="+77011234568"),
            OrderCreate(external_order_id="ORD3", user_phone="+77011234569"),
        ]
    )

    orders, count = order_repo.list(OrderListParams(external_order_ids=["ORD1", "ORD3", "ORD9"]))

    assert count == 2
    assert [o.external_order_id for o in orders] == ["ORD1", "ORD3"]


def test_create_batch_with_no_rows_does_nothing(order_repo):
    order_repo.create_batch([])

    assert order_repo.list(OrderListParams()) == ([], 0)


def test_update_touches_only_matching_rows_and_set_fields(order_repo):
    order_repo.create_batch(
        [
            OrderCreate(external_order_id="ORD1", user_phone="+77011234567", user_name="Anna"),
            OrderCreate(external_order_id="ORD2", user_phone="+77011234568", user_name="Bolat"),
        ]
    )

    updated = order_repo.update(OrderGetParams(external_order_id="ORD1"), OrderUpdate(user_phone="+77019999999"))

    assert updated == 1
    first = order_repo.get(OrderGetParams(external_order_id="ORD1"))
    second = order_repo.get(OrderGetParams(external_order_id="ORD2"))
    assert (first.user_phone, first.user_name) == ("+77019999999", "Anna")
    assert second.user_phone == "+77011234568"


def test_empty_update_changes_nothing(order_repo):
    order_repo.create(OrderCreate(external_order_id="ORD1", user_phone="+77011234567"))

    assert order_repo.update(OrderGetParams(external_order_id="ORD1"), OrderUpdate()) == 0


def test_delete_detail(order_repo, detail_repo):
    order = order_repo.create(OrderCreate(external_order_id="ORD1", user_phone="+77011234567"))
    detail_repo.create_batch(
        [
            OrderDetailCreate(order_id=order.id, product_code="P1"),
            OrderDetailCreate(order_id=order.id, product_code="P2"),
        ]
    )

    deleted = detail_repo.delete(OrderDetailGetParams(product_code="P1"))

    assert deleted == 1
    details, _ = detail_repo.list(OrderDetailListParams(order_id=order.id))
    assert [d.product_code for d in details] == ["P2"]


def test_notification_crud(order_repo, detail_repo, notification_repo):
    order = order_repo.create(OrderCreate(external_order_id="ORD1", user_phone="+77011234567"))
    detail = detail_repo.create(OrderDetailCreate(order_id=order.id, product_code="P1"))
    sent_at = datetime.now(pytz.utc)

    notification = notification_repo.create(
        NotificationCreate(
            order_item_id=detail.id,
            phone_number=order.user_phone,
            status="failed",
            sent_at=sent_at,
            error="timeout",
        )
    )
    notification_repo.update(
        NotificationGetParams(id=notification.id), NotificationUpdate(status="sent", error=None)
    )

    stored = notification_repo.get(NotificationGetParams(order_item_id=detail.id))
    assert stored.status == "sent"
    assert stored.error is None

    sent, count = notification_repo.list(NotificationListParams(statuses=["sent"]))
    assert count == 1
    assert sent[0].id == notification.id


def test_read_schemas_load_from_rows(order_repo, detail_repo, notification_repo):
    order = order_repo.create(OrderCreate(external_order_id="ORD1", user_phone="+77011234567", user_name="Anna"))
    detail = detail_repo.create(OrderDetailCreate(order_id=order.id, product_code="P1"))
    notification = notification_repo.create(
        NotificationCreate(
            order_item_id=detail.id,
            phone_number=order.user_phone,
            status="sent",
            sent_at=datetime.now(pytz.utc),
        )
    )

    assert OrderRead.model_validate(order).external_order_id == "ORD1"
    assert OrderDetailRead.model_validate(detail).order_id == order.id
    assert NotificationRead.model_validate(notification).status == "sent"
