import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from hotel_offers.exceptions.custom import NotificationError
from hotel_offers.schemas.notifications import (
    ActivityLog,
    ActivityType,
    ActorRole,
    DocumentRef,
    Notification,
    NotificationType,
)
from hotel_offers.store import ACTIVITY_LOGS, NOTIFICATIONS, DocumentStore

logger = logging.getLogger(__name__)


def _newest_first(items: list) -> list:
    # Store order is insertion order; reversing first keeps equal timestamps newest-first
    items.reverse()
    items.sort(key=lambda item: item.created_at, reverse=True)
    return items


class NotificationService:
    def __init__(
        self,
        store: DocumentStore,
        client: httpx.AsyncClient | None = None,
        webhook_url: str = "",
        timeout: float = 10.0,
    ) -> None:
        self._store = store
        self._client = client
        self._webhook_url = webhook_url
        self._timeout = timeout

    async def notify(
        self,
        to: str | None,
        type_: NotificationType,
        payload: dict[str, Any],
    ) -> Notification | None:
        """Record a notification for a user. Best-effort, never raises."""
        if not to:
            return None

        notification = Notification(
            id=self._store.new_id(),
            to=to,
            type=type_,
            payload=payload,
            created_at=datetime.now(timezone.utc),
        )
        try:
            await self._store.add(NOTIFICATIONS, notification.to_document())
        except Exception:
            logger.exception("Failed to store %s notification for %s", type_, to)
            return None

        if self._client is not None and self._webhook_url:
            try:
                await self._deliver(notification)
            except (httpx.HTTPError, NotificationError) as exc:
                logger.warning(
                    "Webhook delivery failed for notification %s: %s",
                    notification.id, exc,
                )
        return notification

    async def _deliver(self, notification: Notification) -> None:
        resp = await self._client.post(
            self._webhook_url,
            json=notification.model_dump(mode="json", by_alias=True),
            timeout=self._timeout,
        )
        if resp.status_code >= 400:
            raise NotificationError(resp.text, status_code=resp.status_code)
        logger.debug("Delivered notification %s to webhook", notification.id)

    async def list_for(self, to: str) -> list[Notification]:
        docs = await self._store.query(NOTIFICATIONS, {"to": to})
        return _newest_first([Notification.model_validate(d) for d in docs])

    async def log_activity(
        self,
        type_: ActivityType,
        actor_role: ActorRole,
        actor_id: str,
        message: str,
        ref: DocumentRef | None = None,
        meta: dict[str, Any] | None = None,
    ) -> None:
        entry = ActivityLog(
            id=self._store.new_id(),
            type=type_,
            actor_role=actor_role,
            actor_id=actor_id,
            ref=ref,
            message=message,
            meta=meta,
            created_at=datetime.now(timezone.utc),
        )
        try:
            await self._store.add(ACTIVITY_LOGS, entry.to_document())
        except Exception:
            logger.exception("Failed to record %s activity", type_)

    async def list_activity(self, limit: int = 100) -> list[ActivityLog]:
        docs = await self._store.query(ACTIVITY_LOGS)
        return _newest_first([ActivityLog.model_validate(d) for d in docs])[:limit]
