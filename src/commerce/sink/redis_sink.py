"""Redis Streams event sink.

Each event is appended to a single stream with ``XADD``. Consumers read
the stream with their own consumer groups.
"""

import redis

from commerce.sink.envelope import DomainEvent
from commerce.sink.port import EventSinkPort


class RedisStreamEventSink(EventSinkPort):
    def __init__(self, url: str, stream: str, client=None, maxlen: int | None = 100_000):
        self.stream = stream
        self.maxlen = maxlen
        self.client = client or redis.Redis.from_url(url)

    def publish(self, event: DomainEvent) -> None:
        self.client.xadd(
            self.stream,
            {
                "id": event.id,
                "type": event.type,
                "tenant_id": event.tenant_id,
                "data": event.model_dump_json(),
            },
            maxlen=self.maxlen,
            approximate=True,
        )
