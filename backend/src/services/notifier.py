"""Post-write glue: cache invalidation, notification log, outbound webhook."""

from __future__ import annotations

from collections import deque
from datetime import datetime, timezone
import logging
from typing import Callable, Deque, List, Optional

import httpx

from ..models.notification import NotificationRecord
from .github_store import RemoteFileStore
from .local_state import LocalStateStore

logger = logging.getLogger(__name__)

NOTIFICATION_LIMIT = 50
EMBED_COLOR = 0x6366F1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationService:
    """Runs after every successful write."""

    def __init__(
        self,
        store: RemoteFileStore,
        state: Optional[LocalStateStore] = None,
        *,
        webhook_url: Optional[str] = None,
        actor: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.state = state
        self.webhook_url = webhook_url
        self.actor = actor
        self._transport = transport
        self._now = now or _utcnow
        self._memory_log: Deque[NotificationRecord] = deque(maxlen=NOTIFICATION_LIMIT)

    async def after_write(self, action: str, detail: str = "") -> NotificationRecord:
        """Invalidate cached reads, log the event and notify the webhook."""
        self.store.invalidate_cache()
        record = self.record(action, detail)
        await self.post_webhook(record)
        return record

    def record(self, action: str, detail: str = "") -> NotificationRecord:
        record = NotificationRecord(
            action=action, detail=detail, actor=self.actor, timestamp=self._now()
        )
        if self.state is not None:
            self.state.prepend_notification(record.model_dump(mode="json"), NOTIFICATION_LIMIT)
        else:
            self._memory_log.appendleft(record)
        logger.info(f"Notification: {action} {detail}")
        return record

    def recent(self) -> List[NotificationRecord]:
        """Newest first, at most NOTIFICATION_LIMIT entries."""
        if self.state is not None:
            return [NotificationRecord.model_validate(item) for item in self.state.get_notifications()]
        return list(self._memory_log)

    def build_payload(self, record: NotificationRecord) -> dict:
        title = record.action if not record.actor else f"{record.action} ({record.actor})"
        return {
            "embeds": [
                {
                    "title": title,
                    "description": record.detail,
                    "color": EMBED_COLOR,
                    "footer": {"text": f"Vault Dashboard | {record.timestamp.isoformat(timespec='seconds')}"},
                }
            ]
        }

    async def post_webhook(self, record: NotificationRecord) -> bool:
        """Best effort; failures are logged and never raised."""
        if not self.webhook_url:
            return False
        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
                response = await client.post(self.webhook_url, json=self.build_payload(record))
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Webhook notification failed: {e}")
            return False
        return True


__all__ = ["NotificationService", "NOTIFICATION_LIMIT"]
