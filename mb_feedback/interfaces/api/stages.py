"""Stage trigger routes: each call queues one background run and returns at once.

The run's outcome is only visible in the logs.
"""

from fastapi import APIRouter, Depends

from mb_feedback.domain.schemas.job import Stage
from mb_feedback.interfaces.deps import get_job_runner
from mb_feedback.scheduler.runner import JobRunner

router = APIRouter(tags=["Stages"])


def _accept(runner: JobRunner, stage: Stage) -> dict:
    record = runner.submit(stage)
    return {"status": "accepted", "stage": stage.value, "job_id": record.id}


@router.get("/fetch-orders")
async def fetch_orders(runner: JobRunner = Depends(get_job_runner)):
    """Ingest completed orders from the broker."""
    return _accept(runner, Stage.FETCH_ORDERS)


@router.get("/get-product-codes")
async def get_product_codes(runner: JobRunner = Depends(get_job_runner)):
    """Backfill product codes for orders without details."""
    return _accept(runner, Stage.GET_PRODUCT_CODES)


@router.get("/send-notification")
async def send_notification(runner: JobRunner = Depends(get_job_runner)):
    """Send feedback requests for recent order details."""
    return _accept(runner, Stage.SEND_NOTIFICATION)
