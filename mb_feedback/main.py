"""FastAPI application: main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mb_feedback.config import get_settings
from mb_feedback.infrastructure.database import engine, Base
from mb_feedback.core.logging import configure_logging
from mb_feedback.core.middleware import setup_middleware
from mb_feedback.core.exceptions import AppError, global_exception_handler

# Import all models so SQLAlchemy knows about them
from mb_feedback.domain.models.order import Order  # noqa: F401
from mb_feedback.domain.models.order_detail import OrderDetail  # noqa: F401
from mb_feedback.domain.models.notification import Notification  # noqa: F401

from mb_feedback.interfaces.api.stages import router as stages_router
from mb_feedback.scheduler.jobs import build_job_runner

settings = get_settings()

configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting MB Feedback service...", env=settings.ENVIRONMENT)

    # Create DB tables if missing
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    runner = build_job_runner()
    runner.start()
    app.state.job_runner = runner

    yield

    runner.stop()
    engine.dispose()
    logger.info("MB Feedback service stopped")


app = FastAPI(
    title="MB Feedback",
    description="Order reconciliation and feedback requests for marketplace orders",
    version="1.0.0",
    lifespan=lifespan,
)

setup_middleware(app)

app.add_exception_handler(AppError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(stages_router)


@app.get("/")
def root():
    return {
        "name": "MB Feedback",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
