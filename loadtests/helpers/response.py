"""Response error extraction for load test observability.

Parses storefront API error responses into human-readable messages.
Handles two response shapes:

- Request validation (400): {"error": "Invalid request", "detail": [{"loc": [...], "msg": "..."}]}
- Domain errors (400/403/404/409): {"error": "msg"} or {"error": "msg", "errors": {"field": [...]}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON, return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:300]

    # Schema errors: {"error": "Invalid request", "detail": [{"loc": [...], "msg": "..."}]}
    if isinstance(body.get("detail"), list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    # Invariant failures: {"error": "msg", "errors": {"field": ["msg", ...]}}
    if isinstance(body.get("errors"), dict):
        return " | ".join(f"{k}: {'; '.join(map(str, v))}" for k, v in body["errors"].items())

    if "error" in body:
        return str(body["error"])

    # Unknown shape, stringify and truncate
    return str(body)[:300]
