"""Event sink port: abstract interface for publishing domain events.

The engine programs against the port; adapters are swapped via
configuration.
"""

from abc import ABC, abstractmethod

from commerce.sink.envelope import DomainEvent


class EventSinkPort(ABC):
    """Abstract interface for event sink adapters."""

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Deliver one event. Raises on delivery failure."""
        ...
