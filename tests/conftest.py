import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Must be set before mb_feedback.config is first imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BROKER_API_URL", "http://broker.test")
os.environ.setdefault("VOXIMPLANT_API_URL", "http://voximplant.test")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from mb_feedback.domain.models.notification import Notification  # noqa: E402
from mb_feedback.domain.models.order import Order  # noqa: E402
from mb_feedback.domain.models.order_detail import OrderDetail  # noqa: E402
from mb_feedback.infrastructure.database import Base  # noqa: E402
from mb_feedback.infrastructure.repositories.notification_repository import (  # noqa: E402
    SQLAlchemyNotificationRepository,
)
from mb_feedback.infrastructure.repositories.order_detail_repository import (  # noqa: E402
    SQLAlchemyOrderDetailRepository,
)
from mb_feedback.infrastructure.repositories.order_repository import SQLAlchemyOrderRepository  # noqa: E402


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def order_repo(db_session):
    return SQLAlchemyOrderRepository(db_session, Order)


@pytest.fixture
def detail_repo(db_session):
    return SQLAlchemyOrderDetailRepository(db_session, OrderDetail)


@pytest.fixture
def notification_repo(db_session):
    return SQLAlchemyNotificationRepository(db_session, Notification)
