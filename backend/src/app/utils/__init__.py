"""Utility modules for the products backend."""

from app.utils.responses import error_response
from app.utils.responses import json_response
from app.utils.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)

__all__ = [
    "clear_request_context",
    "configure_logging",
    "error_response",
    "get_logger",
    "json_response",
    "set_request_context",
]
