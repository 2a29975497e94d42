"""Endpoints under /api/notifications"""

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from learnlink.exceptions import LearnLinkError
from learnlink.logging_config import get_logger
from learnlink.models import Notification

if TYPE_CHECKING:
    from learnlink.api.client import ApiClient

logger = get_logger(__name__)


@dataclass
class MarkReadResult:
    """Outcome of marking several notifications read at once"""
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        if self.complete:
            return f"Marked {len(self.succeeded)} notification(s) as read"
        return (
            f"Marked {len(self.succeeded)} notification(s) as read, "
            f"{len(self.failed)} could not be updated"
        )


class NotificationsAPI:

    def __init__(self, client: "ApiClient"):
        self.client = client

    async def list(self) -> List[Notification]:
        response = await self.client.get("/api/notifications", fallback="Failed to fetch notifications")
        return [Notification.model_validate(n) for n in response.data or []]

    async def create(self, message: str, type: str = "general",
                     user_id: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> Notification:
        payload: Dict[str, Any] = {"message": message, "type": type}
        if user_id:
            payload["userId"] = user_id
        if data:
            payload["data"] = data
        response = await self.client.post(
            "/api/notifications", json=payload, fallback="Failed to send notification"
        )
        return Notification.model_validate(response.data or payload)

    async def mark_read(self, notification_id: str) -> None:
        await self.client.post(
            "/api/notifications/read",
            json={"notificationId": notification_id},
            fallback="Failed to mark notification as read",
        )

    async def mark_many_read(self, notification_ids: Iterable[str]) -> MarkReadResult:
        """Mark notifications read concurrently; one failure does not stop the others"""
        ids = list(notification_ids)
        outcomes = await asyncio.gather(
            *(self.mark_read(notification_id) for notification_id in ids),
            return_exceptions=True,
        )

        result = MarkReadResult()
        for notification_id, outcome in zip(ids, outcomes):
            if isinstance(outcome, LearnLinkError):
                result.failed[notification_id] = outcome.message
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.succeeded.append(notification_id)

        if result.failed:
            logger.warning(result.summary(), extra={"failed_ids": list(result.failed)})
        return result
