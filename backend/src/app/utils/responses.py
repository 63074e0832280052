"""Shared response utilities for the products Lambda."""

from __future__ import annotations

import json
import os
from decimal import Decimal
from typing import Any
from typing import Mapping
from typing import Optional


def get_security_headers() -> dict[str, str]:
    """Get security headers for all responses.

    Returns:
        Dictionary of security headers.
    """
    return {
        "X-Content-Type-Options": "nosniff",
        "Cache-Control": "no-store",
    }


def get_cors_headers(
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, str]:
    """Get CORS headers for the response.

    The request origin is echoed back when it is listed in
    CORS_ALLOWED_ORIGINS; otherwise the first configured origin is used.
    An unset variable allows any origin.
    """
    allowed_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    ]

    request_origin = None
    if event:
        headers = event.get("headers") or {}
        request_origin = headers.get("origin") or headers.get("Origin")

    if not allowed_origins or "*" in allowed_origins:
        allow_origin = "*"
    elif request_origin and request_origin in allowed_origins:
        allow_origin = request_origin
    else:
        allow_origin = allowed_origins[0]

    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": (
            "Content-Type,X-Amz-Date,X-Api-Key,X-Amz-Security-Token"
        ),
        "Access-Control-Allow-Methods": "GET,POST,PATCH,DELETE,OPTIONS",
    }


def json_response(
    status_code: int,
    body: Any,
    headers: Optional[dict[str, str]] = None,
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Create an API Gateway proxy response with a JSON body.

    Args:
        status_code: HTTP status code.
        body: Response body (dict or list). Ignored for 204.
        headers: Optional additional headers to include.
        event: Optional Lambda event for CORS origin detection.

    Returns:
        API Gateway response dictionary.
    """
    response_headers = {"Content-Type": "application/json"}
    response_headers.update(get_security_headers())
    response_headers.update(get_cors_headers(event))
    if headers:
        response_headers.update(headers)

    if status_code == 204:
        payload = ""
    else:
        payload = json.dumps(body, default=_json_default)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": payload,
    }


def error_response(
    status_code: int,
    message: str,
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Create an error response with a ``{"message": ...}`` body."""
    return json_response(status_code, {"message": message}, event=event)


def _json_default(value: Any) -> Any:
    # DynamoDB hands numbers back as Decimal
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return str(value)
