"""Pydantic schemas for Notification."""

from pydantic import BaseModel
from datetime import datetime
from typing import Literal, Optional

NotificationStatus = Literal["sent", "failed"]


class NotificationCreate(BaseModel):
    order_item_id: int
    phone_number: str
    status: NotificationStatus
    sent_at: datetime
    error: Optional[str] = None


class NotificationUpdate(BaseModel):
    status: Optional[NotificationStatus] = None
    sent_at: Optional[datetime] = None
    error: Optional[str] = None


class NotificationRead(BaseModel):
    id: int
    order_item_id: int
    phone_number: str
    status: str
    error: Optional[str] = None
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NotificationGetParams(BaseModel):
    id: Optional[int] = None
    order_item_id: Optional[int] = None
    phone_number: Optional[str] = None
    status: Optional[NotificationStatus] = None

    def is_valid(self) -> bool:
        return any(
            v is not None
            for v in (self.id, self.order_item_id, self.phone_number, self.status)
        )


class NotificationListParams(BaseModel):
    id: Optional[int] = None
    ids: Optional[list[int]] = None
    order_item_id: Optional[int] = None
    order_item_ids: Optional[list[int]] = None
    phone_number: Optional[str] = None
    phone_numbers: Optional[list[str]] = None
    status: Optional[NotificationStatus] = None
    statuses: Optional[list[NotificationStatus]] = None
    sent_before: Optional[datetime] = None
    sent_after: Optional[datetime] = None
    created_before: Optional[datetime] = None
    created_after: Optional[datetime] = None
