"""Request parsing helpers for API Gateway proxy events."""

from __future__ import annotations

import base64
import json
from typing import Any, Mapping, Optional


def parse_body(event: Mapping[str, Any]) -> Any:
    """Decode the JSON request body.

    An absent body parses as an empty object. Malformed JSON raises
    ``json.JSONDecodeError`` and is left to the caller's outer handler.
    """
    raw = event.get("body") or ""
    if raw and event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")
    return json.loads(raw or "{}")


def path_parameter(event: Mapping[str, Any], name: str) -> Optional[str]:
    """Return a path parameter value, or None when absent or empty."""
    params = event.get("pathParameters") or {}
    value = params.get(name)
    return value or None


def request_id(event: Mapping[str, Any], context: Any = None) -> str:
    """Return the API Gateway request id, else the Lambda request id."""
    req_id = (event.get("requestContext") or {}).get("requestId")
    if req_id:
        return str(req_id)
    return str(getattr(context, "aws_request_id", "") or "")
