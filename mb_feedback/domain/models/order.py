"""Order domain model: maps to the 'orders' table."""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from mb_feedback.infrastructure.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_order_id = Column(String(100), unique=True, nullable=False, index=True)

    # Contact info (the only part that may be corrected after creation)
    user_phone = Column(String(20), nullable=False, index=True)
    user_name = Column(String(200), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<Order {self.external_order_id} - {self.user_phone}>"
