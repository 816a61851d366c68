"""Notification service: sends feedback requests via Voximplant.

Features:
- Only details created within a trailing window are considered
- Exactly one notification row per attempt, sent or failed
- Bookkeeping failures stop the run (the detail is retried next time)
"""

from datetime import datetime, timedelta
from typing import Dict, Optional

import pytz
import structlog

from mb_feedback.config import get_settings
from mb_feedback.core.exceptions import NotificationRecordError
from mb_feedback.domain.gateways import Notifier
from mb_feedback.domain.models.notification import STATUS_FAILED, STATUS_SENT
from mb_feedback.domain.repositories.notification_repository import NotificationRepository
from mb_feedback.domain.repositories.order_detail_repository import OrderDetailRepository
from mb_feedback.domain.schemas.notification import NotificationCreate
from mb_feedback.domain.schemas.order_detail import OrderDetailListParams, OrderDetailWithUserInfo

settings = get_settings()
logger = structlog.get_logger(__name__)

MAX_ERROR_LENGTH = 500


def default_window() -> timedelta:
    return timedelta(minutes=settings.NOTIFICATION_WINDOW_MINUTES)


async def _notify_detail(
    detail: OrderDetailWithUserInfo,
    notification_repo: NotificationRepository,
    notifier: Notifier,
) -> str:
    error: Optional[str] = None
    try:
        await notifier.send_notification(
            detail.order_id, detail.user_phone, detail.user_name or "", detail.product_code
        )
        status = STATUS_SENT
    except Exception as e:
        status = STATUS_FAILED
        error = str(e)[:MAX_ERROR_LENGTH]
        logger.warning(
            "Notification send failed",
            detail_id=detail.id,
            order_id=detail.order_id,
            error=error,
        )

    sent_at = datetime.now(pytz.utc)

    try:
        notification_repo.create(
            NotificationCreate(
                order_item_id=detail.id,
                phone_number=detail.user_phone,
                status=status,
                sent_at=sent_at,
                error=error,
            )
        )
    except Exception as e:
        # A send that succeeded will be repeated on the next run
        raise NotificationRecordError(
            f"Failed to record notification for detail {detail.id}: {e}",
            {"detail_id": detail.id, "order_id": detail.order_id, "send_status": status},
        ) from e

    return status


async def dispatch_notifications(
    detail_repo: OrderDetailRepository,
    notification_repo: NotificationRepository,
    notifier: Notifier,
    window: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """Send one feedback request per recent detail without a notification.

    Details older than ``window`` are never picked up, even if they were
    never notified.
    """
    window = window if window is not None else default_window()
    now = now or datetime.now(pytz.utc)
    created_after = now - window

    details = detail_repo.list_without_notification(OrderDetailListParams(created_after=created_after))
    result = {STATUS_SENT: 0, STATUS_FAILED: 0}
    if not details:
        logger.info("No details awaiting notification", created_after=created_after.isoformat())
        return result

    for detail in details:
        status = await _notify_detail(detail, notification_repo, notifier)
        result[status] += 1

    logger.info("Notifications dispatched", pending=len(details), **result)
    return result
