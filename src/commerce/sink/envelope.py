"""Domain event envelope and the fire-and-forget publisher."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger(__name__)


class DomainEvent(BaseModel):
    """An externally visible fact about a tenant's store."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    type: str
    tenant_id: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    payload: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)


def publish_event(event_type: str, tenant_id, payload: dict | None = None, source: str = "engine") -> DomainEvent:
    """Build an envelope and hand it to the configured sink.

    Delivery failures are logged and never reach the caller: the state
    change that produced the event has already been persisted.
    """
    from commerce.sink import get_event_sink

    event = DomainEvent(
        type=event_type,
        tenant_id=str(tenant_id),
        payload=payload or {},
        metadata={"source": source},
    )

    try:
        get_event_sink().publish(event)
    except Exception as exc:
        logger.warning(
            "event_publish_failed",
            event_type=event_type,
            event_id=event.id,
            tenant_id=event.tenant_id,
            error=str(exc),
        )
    else:
        logger.debug("event_published", event_type=event_type, event_id=event.id, tenant_id=event.tenant_id)

    return event
