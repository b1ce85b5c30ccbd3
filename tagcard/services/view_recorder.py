"""Best-effort view recording: one event row plus the denormalized counter."""
from __future__ import annotations

from loguru import logger

from tagcard.repositories.sql_repository import SQLRepository

MAX_REFERRER = 512
MAX_USER_AGENT = 1024


def _trim(value: str | None, limit: int) -> str | None:
    v = (value or "").strip()
    return v[:limit] if v else None


class ViewRecorder:
    """Never raises; a failed step is logged and the other step still runs."""

    def __init__(self, repository: SQLRepository | None = None) -> None:
        self.repository = repository or SQLRepository()

    def record_view(self, profile_id: str, referrer: str | None = None, user_agent: str | None = None) -> None:
        try:
            self.repository.add_view_event(
                profile_id,
                _trim(referrer, MAX_REFERRER),
                _trim(user_agent, MAX_USER_AGENT),
            )
        except Exception as exc:
            logger.warning("Failed to insert view event for {}: {}", profile_id, exc)
        try:
            self.repository.increment_view_count(profile_id)
        except Exception as exc:
            logger.warning("Failed to increment view count for {}: {}", profile_id, exc)
