"""
API Dependencies.
"""

from fastapi import Request

from mb_feedback.scheduler.runner import JobRunner


def get_job_runner(request: Request) -> JobRunner:
    """Get the job runner created at application startup."""
    return request.app.state.job_runner
