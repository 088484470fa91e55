"""Event sink abstraction: where external domain events are delivered."""

from commerce.config import setting

_sink_instance = None


def get_event_sink():
    """Return the configured event sink (singleton).

    Uses FakeEventSink by default. Configure via the EVENT_SINK_ADAPTER
    setting: ``fake``, ``logging`` or ``redis``.
    """
    global _sink_instance
    if _sink_instance is None:
        adapter = setting("EVENT_SINK_ADAPTER")
        if adapter == "fake":
            from commerce.sink.fake_sink import FakeEventSink

            _sink_instance = FakeEventSink()
        elif adapter == "logging":
            from commerce.sink.logging_sink import LoggingEventSink

            _sink_instance = LoggingEventSink()
        elif adapter == "redis":
            from commerce.sink.redis_sink import RedisStreamEventSink

            _sink_instance = RedisStreamEventSink(
                url=setting("EVENT_SINK_REDIS_URL"),
                stream=setting("EVENT_SINK_STREAM"),
            )
        else:
            raise ValueError(f"Unknown event sink adapter: {adapter}")
    return _sink_instance


def reset_event_sink():
    """Reset the sink singleton (useful for testing)."""
    global _sink_instance
    _sink_instance = None
