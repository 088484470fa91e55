"""Fake event sink: records events in memory for tests and development."""

from commerce.sink.envelope import DomainEvent
from commerce.sink.port import EventSinkPort


class FakeEventSink(EventSinkPort):
    """In-memory sink that always succeeds by default."""

    def __init__(self):
        self.events: list[DomainEvent] = []
        self.should_succeed = True
        self.failure_reason = "Event sink unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Event sink unavailable"):
        """Configure the fake sink behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def publish(self, event: DomainEvent) -> None:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)
        self.events.append(event)

    def of_type(self, event_type: str) -> list[DomainEvent]:
        return [event for event in self.events if event.type == event_type]

    def clear(self):
        self.events.clear()
