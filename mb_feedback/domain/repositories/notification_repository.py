"""Notification Repository Interface."""

from mb_feedback.domain.repositories.base import BaseRepository
from mb_feedback.domain.models.notification import Notification


class NotificationRepository(BaseRepository[Notification]):
    """Interface for Notification operations (plain CRUD)."""
