"""REST API for Time Tracker.

This module provides the FastAPI application that clients talk to. Every
endpoint answers with HTTP 200; failures are reported through an ``error``
key in the JSON body.

Usage:
    # Start server
    time-tracker serve

    # Human-readable overview of the endpoints
    http://127.0.0.1:5540/api
"""

__all__ = ["create_app", "run_server"]

from time_tracker.api.server import create_app, run_server  # noqa: F401
