"""Pydantic schemas for OrderDetail."""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class OrderDetailCreate(BaseModel):
    order_id: int
    product_code: str


class OrderDetailUpdate(BaseModel):
    product_code: Optional[str] = None


class OrderDetailRead(BaseModel):
    id: int
    order_id: int
    product_code: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class OrderDetailWithUserInfo(BaseModel):
    """Detail row joined with the parent order's contact info.

    ``order_id`` holds the broker's external order ID, which is what the
    feedback message refers to.
    """
    id: int
    product_code: str
    order_id: str
    user_phone: str
    user_name: Optional[str] = None

    model_config = {"from_attributes": True}


class OrderDetailGetParams(BaseModel):
    id: Optional[int] = None
    order_id: Optional[int] = None
    product_code: Optional[str] = None

    def is_valid(self) -> bool:
        return any(v is not None for v in (self.id, self.order_id, self.product_code))


class OrderDetailListParams(BaseModel):
    id: Optional[int] = None
    ids: Optional[list[int]] = None
    order_id: Optional[int] = None
    order_ids: Optional[list[int]] = None
    product_code: Optional[str] = None
    product_codes: Optional[list[str]] = None
    created_before: Optional[datetime] = None
    created_after: Optional[datetime] = None
