"""Run one pipeline stage in the foreground and exit.

Usage: python scripts/run_stage.py fetch-orders|get-product-codes|send-notification
"""

import argparse
import asyncio
import os
import sys

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import structlog

from mb_feedback.core.logging import configure_logging
from mb_feedback.domain.models.notification import Notification  # noqa: F401
from mb_feedback.domain.models.order import Order  # noqa: F401
from mb_feedback.domain.models.order_detail import OrderDetail  # noqa: F401
from mb_feedback.domain.schemas.job import JobStatus, Stage
from mb_feedback.infrastructure.database import Base, engine
from mb_feedback.scheduler.jobs import build_job_runner

logger = structlog.get_logger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a single pipeline stage")
    parser.add_argument("stage", choices=[s.value for s in Stage])
    args = parser.parse_args()

    configure_logging()
    Base.metadata.create_all(bind=engine)

    runner = build_job_runner()
    record = asyncio.run(runner.run(Stage(args.stage)))
    engine.dispose()

    if record.status == JobStatus.FAILED:
        logger.error("Stage run failed", stage=args.stage, error=record.error)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
