"""Response error extraction for load test observability.

Parses Vehicle Reviews API error responses into human-readable messages.
Handles the service's envelope shapes:

- Validation (400): {"success": false, "errors": {"field": ["msg", ...]}}
- Other failures (403/404/503): {"success": false, "error": "msg"}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except Exception:
        # Not JSON, return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and isinstance(body.get("errors"), dict):
        parts = []
        for field, messages in body["errors"].items():
            if isinstance(messages, list):
                messages = "; ".join(str(m) for m in messages)
            parts.append(f"{field}: {messages}")
        return " | ".join(parts)

    if isinstance(body, dict) and "error" in body:
        return str(body["error"])

    # Unknown shape, stringify and truncate
    return str(body)[:300]
