"""Dependency injection for FastAPI endpoints.

This module provides dependency functions for use with FastAPI's dependency
injection system. The gateway is created once per application and handed to
every request through these functions, so tests can swap in an in-memory
store.
"""

import json
from typing import Any

from fastapi import Request  # type: ignore[import-untyped]

from time_tracker.core.config import ConfigManager
from time_tracker.core.storage import Gateway
from time_tracker.core.tracker import TimeTracker

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_config(request: Request) -> ConfigManager:
    """Get configuration manager instance from app state.

    Note:
        This is a dependency function for FastAPI endpoints.
        Use with Depends(get_config) in endpoint parameters.
    """
    config: ConfigManager = request.app.state.config
    return config


def get_gateway(request: Request) -> Gateway:
    """Get the application's persistence gateway."""
    gateway: Gateway = request.app.state.gateway
    return gateway


def get_tracker(request: Request) -> TimeTracker:
    """Get tracker instance bound to the application's gateway.

    Note:
        This is a dependency function for FastAPI endpoints.
        Use with Depends(get_tracker) in endpoint parameters.
    """
    return TimeTracker(get_gateway(request))


async def get_payload(request: Request) -> dict[str, Any]:
    """Read the request body as a flat dictionary.

    JSON bodies and form bodies are both accepted. A body that is missing,
    malformed or not an object yields an empty dictionary, which the
    endpoints report as missing fields.
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    body = await request.body()
    if not body:
        return {}
    try:
        payload = json.loads(body)
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}
