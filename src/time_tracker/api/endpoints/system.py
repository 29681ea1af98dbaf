"""System endpoints for service metadata.

This module provides the human-readable API overview page and the version
endpoint clients use to identify the server.
"""

from pathlib import Path

from fastapi import APIRouter  # type: ignore[import-untyped]
from fastapi.responses import FileResponse  # type: ignore[import-untyped]

from time_tracker import __description__, __title__, __version__
from time_tracker.api.models import VersionResponse

router = APIRouter()

INDEX_FILE = Path(__file__).resolve().parent.parent / "static" / "index.html"


@router.get("", response_class=FileResponse, include_in_schema=False)
async def index() -> FileResponse:
    """Serve the API overview page."""
    return FileResponse(INDEX_FILE, media_type="text/html;charset=UTF-8")


@router.get("/version", response_model=VersionResponse)
async def version() -> VersionResponse:
    """Get service name, description and version.

    Example:
        >>> GET /api/version
        {
            "behavior": "VERSION",
            "name": "time-tracker",
            "description": "Log work time against named tracks.",
            "version": "1.0.0"
        }
    """
    return VersionResponse(name=__title__, description=__description__, version=__version__)
