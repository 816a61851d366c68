"""Pydantic schemas for the Order domain."""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class FetchedOrder(BaseModel):
    """Completed order as reported by the broker, before normalisation."""
    external_order_id: str
    user_phone: str = ""
    user_name: str = ""


class OrderCreate(BaseModel):
    external_order_id: str
    user_phone: str
    user_name: Optional[str] = None


class OrderUpdate(BaseModel):
    """Contact-info correction; the only mutation allowed on an order."""
    user_phone: Optional[str] = None
    user_name: Optional[str] = None


class OrderRead(BaseModel):
    id: int
    external_order_id: str
    user_phone: str
    user_name: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class OrderGetParams(BaseModel):
    id: Optional[int] = None
    external_order_id: Optional[str] = None
    user_phone: Optional[str] = None

    def is_valid(self) -> bool:
        """At least one filter must be set."""
        return any(v is not None for v in (self.id, self.external_order_id, self.user_phone))


class OrderListParams(BaseModel):
    id: Optional[int] = None
    ids: Optional[list[int]] = None
    external_order_id: Optional[str] = None
    external_order_ids: Optional[list[str]] = None
    user_phone: Optional[str] = None
    user_phones: Optional[list[str]] = None
    created_before: Optional[datetime] = None
    created_after: Optional[datetime] = None
