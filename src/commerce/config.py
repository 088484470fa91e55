"""Engine settings.

Values are resolved from an environment variable of the same name first,
then from the ``[custom]`` table of ``domain.toml``, then from the
defaults below.
"""

import os

from commerce.domain import commerce

DEFAULTS = {
    "ORDER_NUMBER_PREFIX": "TTP",
    "MAX_PRODUCT_PRICE": 1_000_000,
    "MIN_CONTRAST_RATIO": 4.5,
    "LOW_STOCK_THRESHOLD": 5,
    "DEFAULT_GST_RATE": 18.0,
    "QUERY_DEFAULT_LIMIT": 20,
    "STOREFRONT_BASE_URL": "http://localhost:3000",
    "EVENT_SINK_ADAPTER": "fake",
    "EVENT_SINK_STREAM": "commerce:events",
    "EVENT_SINK_REDIS_URL": "redis://localhost:6379/0",
}


def _coerce(raw, like):
    if isinstance(like, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(like, int):
        return int(raw)
    if isinstance(like, float):
        return float(raw)
    return raw


def setting(name: str, default=None):
    """Return the configured value for ``name``."""
    fallback = DEFAULTS.get(name, default) if default is None else default

    if name in os.environ:
        return _coerce(os.environ[name], fallback)

    custom = commerce.config.get("custom") or {}
    if name in custom:
        return custom[name]

    return fallback
