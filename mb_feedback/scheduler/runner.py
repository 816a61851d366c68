"""Stage runner: single-flight execution of pipeline stages.

Each stage has its own asyncio lock held for the whole run, so a trigger that
arrives while the stage is running waits and then runs again. Different
stages run independently. Submitted runs are handed to the APScheduler
event-loop scheduler as one-off jobs and report back only through logs and
the in-memory job history.
"""

import asyncio
import uuid
from collections import OrderedDict
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import pytz
import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from asgi_correlation_id import correlation_id

from mb_feedback.config import get_settings
from mb_feedback.domain.schemas.job import JobRecord, JobStatus, Stage

settings = get_settings()
logger = structlog.get_logger(__name__)
tz = pytz.timezone(settings.TIMEZONE)

StageJob = Callable[[], Awaitable[Any]]


class JobRunner:
    """Runs stage jobs, at most one execution per stage at a time."""

    def __init__(
        self,
        jobs: Mapping[Stage, StageJob],
        scheduler: Optional[AsyncIOScheduler] = None,
        history_size: Optional[int] = None,
    ):
        self._jobs: Dict[Stage, StageJob] = dict(jobs)
        self._locks: Dict[Stage, asyncio.Lock] = {stage: asyncio.Lock() for stage in self._jobs}
        self._history: "OrderedDict[str, JobRecord]" = OrderedDict()
        self._history_size = history_size or settings.JOB_HISTORY_SIZE
        self.scheduler = scheduler

    def start(self) -> None:
        # Must be created inside the running event loop
        if self.scheduler is None:
            self.scheduler = AsyncIOScheduler(timezone=tz)
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Job runner started", stages=[s.value for s in self._jobs])

    def stop(self) -> None:
        if self.scheduler is not None and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Job runner stopped")

    def is_running(self, stage: Stage) -> bool:
        return self._locks[stage].locked()

    def get(self, job_id: str) -> Optional[JobRecord]:
        return self._history.get(job_id)

    def _new_record(self, stage: Stage) -> JobRecord:
        if stage not in self._jobs:
            raise KeyError(f"No job registered for stage {stage!r}")

        record = JobRecord(
            id=uuid.uuid4().hex,
            stage=stage,
            submitted_at=datetime.now(tz),
            request_id=correlation_id.get(),
        )
        self._history[record.id] = record
        while len(self._history) > self._history_size:
            self._history.popitem(last=False)
        return record

    def submit(self, stage: Stage) -> JobRecord:
        """Queue a stage run and return immediately."""
        if self.scheduler is None or not self.scheduler.running:
            raise RuntimeError("Job runner is not started")
        record = self._new_record(stage)
        self.scheduler.add_job(
            self._execute,
            args=[record],
            id=record.id,
            name=f"{stage.value} {record.id[:8]}",
            misfire_grace_time=None,
        )
        logger.info("Stage submitted", stage=stage.value, job_id=record.id)
        return record

    async def run(self, stage: Stage) -> JobRecord:
        """Run a stage in the current task, waiting for the stage lock."""
        record = self._new_record(stage)
        await self._execute(record)
        return record

    async def _execute(self, record: JobRecord) -> None:
        lock = self._locks[record.stage]
        context = {"job_id": record.id, "stage": record.stage.value}
        if record.request_id:
            context["request_id"] = record.request_id

        with structlog.contextvars.bound_contextvars(**context):
            if lock.locked():
                logger.info("Stage already running, waiting for it to finish")

            async with lock:
                record.status = JobStatus.RUNNING
                record.started_at = datetime.now(tz)
                logger.info("Stage started")
                try:
                    result = await self._jobs[record.stage]()
                except asyncio.CancelledError:
                    record.status = JobStatus.FAILED
                    record.error = "cancelled"
                    logger.warning("Stage cancelled")
                    raise
                except Exception as e:
                    record.status = JobStatus.FAILED
                    record.error = str(e)
                    logger.exception("Stage failed", error=str(e))
                else:
                    record.status = JobStatus.SUCCEEDED
                    logger.info("Stage finished", result=result)
                finally:
                    record.finished_at = datetime.now(tz)
