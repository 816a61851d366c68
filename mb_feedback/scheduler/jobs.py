"""Stage jobs: wire a DB session, repositories and HTTP clients to each stage."""

from mb_feedback.application.services.notification_service import dispatch_notifications
from mb_feedback.application.services.order_detail_service import backfill_product_details
from mb_feedback.application.services.order_service import ingest_completed_orders
from mb_feedback.domain.models.notification import Notification
from mb_feedback.domain.models.order import Order
from mb_feedback.domain.models.order_detail import OrderDetail
from mb_feedback.domain.schemas.job import Stage
from mb_feedback.infrastructure.broker_api import BrokerAPIClient
from mb_feedback.infrastructure.database import SessionLocal
from mb_feedback.infrastructure.repositories.notification_repository import SQLAlchemyNotificationRepository
from mb_feedback.infrastructure.repositories.order_detail_repository import SQLAlchemyOrderDetailRepository
from mb_feedback.infrastructure.repositories.order_repository import SQLAlchemyOrderRepository
from mb_feedback.infrastructure.voximplant_api import VoximplantClient
from mb_feedback.scheduler.runner import JobRunner


async def fetch_orders_job() -> int:
    """Ingest completed orders from the broker."""
    db = SessionLocal()
    try:
        repo = SQLAlchemyOrderRepository(db, Order)
        return await ingest_completed_orders(repo, BrokerAPIClient())
    finally:
        db.close()


async def product_codes_job() -> int:
    """Backfill product codes for orders without details."""
    db = SessionLocal()
    try:
        order_repo = SQLAlchemyOrderRepository(db, Order)
        detail_repo = SQLAlchemyOrderDetailRepository(db, OrderDetail)
        return await backfill_product_details(order_repo, detail_repo, BrokerAPIClient())
    finally:
        db.close()


async def send_notification_job() -> dict:
    """Send feedback requests for recent details."""
    db = SessionLocal()
    try:
        detail_repo = SQLAlchemyOrderDetailRepository(db, OrderDetail)
        notification_repo = SQLAlchemyNotificationRepository(db, Notification)
        return await dispatch_notifications(detail_repo, notification_repo, VoximplantClient())
    finally:
        db.close()


STAGE_JOBS = {
    Stage.FETCH_ORDERS: fetch_orders_job,
    Stage.GET_PRODUCT_CODES: product_codes_job,
    Stage.SEND_NOTIFICATION: send_notification_job,
}


def build_job_runner() -> JobRunner:
    return JobRunner(STAGE_JOBS)
