"""Schemas for background stage runs."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Stage(str, Enum):
    FETCH_ORDERS = "fetch-orders"
    GET_PRODUCT_CODES = "get-product-codes"
    SEND_NOTIFICATION = "send-notification"


class JobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class JobRecord(BaseModel):
    id: str
    stage: Stage
    status: JobStatus = JobStatus.QUEUED
    submitted_at: datetime
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    error: Optional[str] = None
    request_id: Optional[str] = None
