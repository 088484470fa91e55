"""Logging event sink: writes every event to the structured log."""

import structlog

from commerce.sink.envelope import DomainEvent
from commerce.sink.port import EventSinkPort

logger = structlog.get_logger(__name__)


class LoggingEventSink(EventSinkPort):
    def publish(self, event: DomainEvent) -> None:
        logger.info(
            "domain_event",
            event_type=event.type,
            event_id=event.id,
            tenant_id=event.tenant_id,
            payload=event.payload,
            source=event.metadata.get("source"),
        )
