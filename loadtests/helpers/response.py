"""Response error extraction for load test observability.

Turns commerce API responses into one-line failure messages. Three shapes
show up:

- Request schema errors (422): {"detail": [{"loc": [...], "msg": "..."}]}
- Domain errors (400/404): {"error": "msg"} or {"error": {"field": ["msg"]}}
- Action batches (200): {"results": [{"action": {...}, "success": false, "error": "msg"}]}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response

_MAX_DETAIL = 300


def _flatten(error) -> str:
    if isinstance(error, dict):
        return " | ".join(f"{key}: {_flatten(value)}" for key, value in error.items())
    if isinstance(error, list):
        return ", ".join(str(item) for item in error)
    return str(error)


def extract_error_detail(response: Response) -> str:
    """Extract a compact error message suitable for Locust failures and log lines."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:_MAX_DETAIL] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:_MAX_DETAIL]

    if isinstance(body.get("detail"), list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if "error" in body:
        return _flatten(body["error"])

    if isinstance(body.get("results"), list):
        failures = [
            f"{result['action']['type']}: {result.get('error')}"
            for result in body["results"]
            if not result.get("success")
        ]
        if failures:
            return " | ".join(failures)

    return str(body)[:_MAX_DETAIL]
