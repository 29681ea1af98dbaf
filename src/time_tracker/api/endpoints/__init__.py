"""API endpoints.

This package contains all API endpoint routers organized by resource type.
Each module defines a FastAPI router that is included in the main application.

Available routers:
- system: API overview page and version metadata
- accounts: Login, registration and account details
- tracks: Track creation, updates, deletion and totals
"""

__all__ = ["system", "accounts", "tracks"]

from time_tracker.api.endpoints import accounts, system, tracks  # noqa: F401
