"""
Post-commit change notifications.

Publishing happens after the transaction is committed; a failing publisher is
logged and never turns a committed mutation into an error.
"""

import logging
import uuid
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel, Field

from shared.core.config import settings

logger = logging.getLogger(__name__)


class AssetEvent(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: str
    org_id: str
    entity_type: str = "asset"
    entity_id: str
    action: str
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def make_asset_event(action: str, org_id, entity_id, before=None, after=None, **metadata) -> AssetEvent:
    return AssetEvent(
        type=f"asset.{action}",
        org_id=str(org_id),
        entity_id=str(entity_id),
        action=action,
        before=before,
        after=after,
        metadata={"source": "asset-service", **metadata},
    )


class EventPublisher:
    def publish(self, event: AssetEvent) -> None:
        raise NotImplementedError


class LoggingEventPublisher(EventPublisher):
    def publish(self, event: AssetEvent) -> None:
        logger.info(f"Event {event.type} for {event.entity_type} {event.entity_id} (org {event.org_id})")


class WebhookEventPublisher(EventPublisher):
    def __init__(self, url: str, timeout: float = 5.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def publish(self, event: AssetEvent) -> None:
        response = self.session.post(
            self.url,
            data=event.model_dump_json(),
            headers={"Content-Type": "application/json", "X-Event-Type": event.type},
            timeout=self.timeout,
        )
        response.raise_for_status()


def dispatch(publisher: Optional[EventPublisher], event: AssetEvent) -> bool:
    """Fire-and-forget: returns False instead of raising when delivery fails."""
    if publisher is None:
        return False
    try:
        publisher.publish(event)
        return True
    except Exception:
        logger.exception(f"Failed to emit {event.type} event for asset {event.entity_id}")
        return False


def get_event_publisher() -> EventPublisher:
    if settings.ASSET_EVENTS_WEBHOOK_URL:
        return WebhookEventPublisher(
            settings.ASSET_EVENTS_WEBHOOK_URL,
            timeout=settings.ASSET_EVENTS_TIMEOUT_SECONDS,
        )
    return LoggingEventPublisher()


@lru_cache(maxsize=1)
def shared_event_publisher() -> EventPublisher:
    """Process-wide publisher, so the webhook session and its connection pool are reused."""
    return get_event_publisher()
