from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
import pytz

from fakes import FakeNotifier
from mb_feedback.application.services.notification_service import dispatch_notifications
from mb_feedback.core.exceptions import NotificationRecordError
from mb_feedback.domain.schemas.notification import NotificationListParams
from mb_feedback.domain.schemas.order import OrderCreate, OrderGetParams
from mb_feedback.domain.schemas.order_detail import OrderDetailCreate, OrderDetailListParams


def _seed(order_repo, detail_repo, external_id="ORD1", codes=("P1", "P2"), name="Anna"):
    order = order_repo.create(OrderCreate(external_order_id=external_id, user_phone="+77011234567", user_name=name))
    detail_repo.create_batch([OrderDetailCreate(order_id=order.id, product_code=code) for code in codes])
    return order


@pytest.mark.asyncio
async def test_dispatch_records_sent_and_failed(order_repo, detail_repo, notification_repo):
    _seed(order_repo, detail_repo)
    notifier = FakeNotifier(fail_for={"P2": RuntimeError("channel closed")})

    result = await dispatch_notifications(detail_repo, notification_repo, notifier)

    assert result == {"sent": 1, "failed": 1}
    assert notifier.sent == [("ORD1", "+77011234567", "Anna", "P1")]

    notifications, count = notification_repo.list(NotificationListParams())
    assert count == 2
    assert [n.status for n in notifications] == ["sent", "failed"]
    assert notifications[0].error is None
    assert "channel closed" in notifications[1].error
    assert all(n.phone_number == "+77011234567" for n in notifications)
    assert all(n.sent_at is not None for n in notifications)


@pytest.mark.asyncio
async def test_dispatch_never_repeats_a_detail(order_repo, detail_repo, notification_repo):
    _seed(order_repo, detail_repo)
    notifier = FakeNotifier(fail_for={"P2": RuntimeError("channel closed")})

    await dispatch_notifications(detail_repo, notification_repo, notifier)
    second = await dispatch_notifications(detail_repo, notification_repo, notifier)

    assert second == {"sent": 0, "failed": 0}
    assert len(notifier.sent) == 1
    _, count = notification_repo.list(NotificationListParams())
    assert count == 2


@pytest.mark.asyncio
async def test_dispatch_ignores_details_outside_window(order_repo, detail_repo, notification_repo):
    _seed(order_repo, detail_repo)
    notifier = FakeNotifier()
    later = datetime.now(pytz.utc) + timedelta(hours=2)

    result = await dispatch_notifications(
        detail_repo, notification_repo, notifier, window=timedelta(hours=1), now=later
    )

    assert result == {"sent": 0, "failed": 0}
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_dispatch_passes_empty_name_for_missing_name(order_repo, detail_repo, notification_repo):
    _seed(order_repo, detail_repo, codes=("P1",), name=None)
    notifier = FakeNotifier()

    await dispatch_notifications(detail_repo, notification_repo, notifier)

    assert notifier.sent == [("ORD1", "+77011234567", "", "P1")]


@pytest.mark.asyncio
async def test_dispatch_stops_when_recording_fails(order_repo, detail_repo, notification_repo):
    _seed(order_repo, detail_repo)
    notifier = FakeNotifier()
    broken_repo = MagicMock()
    broken_repo.create.side_effect = RuntimeError("disk full")

    with pytest.raises(NotificationRecordError) as exc_info:
        await dispatch_notifications(detail_repo, broken_repo, notifier)

    assert exc_info.value.details["send_status"] == "sent"
    assert len(notifier.sent) == 1
    assert broken_repo.create.call_count == 1

    # Nothing was recorded, so both details are still pending
    pending = detail_repo.list_without_notification(OrderDetailListParams())
    assert [d.product_code for d in pending] == ["P1", "P2"]


def test_pending_details_carry_order_contact_info(order_repo, detail_repo):
    order = _seed(order_repo, detail_repo, codes=("P1",))

    pending = detail_repo.list_without_notification(OrderDetailListParams())

    assert len(pending) == 1
    assert pending[0].order_id == "ORD1"
    assert pending[0].user_phone == order.user_phone
    assert pending[0].user_name == "Anna"
    assert order_repo.get(OrderGetParams(external_order_id="ORD1")).id == order.id
