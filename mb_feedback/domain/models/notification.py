"""Notification: outcome of the feedback request sent for an order detail."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func

from mb_feedback.infrastructure.database import Base

STATUS_SENT = "sent"
STATUS_FAILED = "failed"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # No unique constraint: one row per detail is guaranteed by the dispatch query
    order_item_id = Column(Integer, ForeignKey("order_details.id"), nullable=False, index=True)
    phone_number = Column(String(20), nullable=False, index=True)
    status = Column(String(20), nullable=False)  # sent, failed
    error = Column(Text, nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Notification {self.order_item_id} - {self.status}>"
