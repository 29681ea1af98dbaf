"""Track endpoints for creating, updating, deleting and reading tracks."""

from typing import Any, Union

from fastapi import APIRouter, Depends  # type: ignore[import-untyped]

from time_tracker.api.dependencies import get_payload, get_tracker
from time_tracker.api.models import (
    ErrorResponse,
    MessageResponse,
    SaveAckResponse,
    TrackInfoResponse,
    TrackRequest,
    UpdateTrackRequest,
    parse_request,
)
from time_tracker.core.tracker import TimeTracker, TrackerError

router = APIRouter()

INCOMPLETE = "Incomplete request."


@router.post("/new", response_model=Union[MessageResponse, ErrorResponse])
async def create_track(
    payload: dict[str, Any] = Depends(get_payload),
    tracker: TimeTracker = Depends(get_tracker),
) -> Union[MessageResponse, ErrorResponse]:
    """Create a track with zero seconds.

    Example:
        >>> POST /api/new
        {"uid": 1, "track": "Reading"}
        {"message": "Added track!"}
    """
    request = parse_request(TrackRequest, payload)
    if request is None:
        return ErrorResponse(error=INCOMPLETE)

    try:
        tracker.create_track(request.uid, request.track)
    except TrackerError as e:
        return ErrorResponse(error=str(e))
    return MessageResponse(message="Added track!")


@router.post("/update", response_model=Union[SaveAckResponse, ErrorResponse])
async def update_track(
    payload: dict[str, Any] = Depends(get_payload),
    tracker: TimeTracker = Depends(get_tracker),
) -> Union[SaveAckResponse, ErrorResponse]:
    """Add seconds to a track.

    Example:
        >>> POST /api/update
        {"uid": 1, "track": "reading", "seconds": 30}
        {"behavior": "SAVEACK", "message": "Saved!"}
    """
    request = parse_request(UpdateTrackRequest, payload)
    if request is None:
        return ErrorResponse(error=INCOMPLETE)

    try:
        tracker.add_seconds(request.uid, request.track, request.seconds)
    except TrackerError as e:
        return ErrorResponse(error=str(e))
    return SaveAckResponse()


@router.post("/delete", response_model=Union[MessageResponse, ErrorResponse])
async def delete_track(
    payload: dict[str, Any] = Depends(get_payload),
    tracker: TimeTracker = Depends(get_tracker),
) -> Union[MessageResponse, ErrorResponse]:
    """Delete a track.

    Example:
        >>> POST /api/delete
        {"uid": 1, "track": "Reading"}
        {"message": "Track deleted."}
    """
    request = parse_request(TrackRequest, payload)
    if request is None:
        return ErrorResponse(error=INCOMPLETE)

    try:
        tracker.delete_track(request.uid, request.track)
    except TrackerError as e:
        return ErrorResponse(error=str(e))
    return MessageResponse(message="Track deleted.")


@router.post("/count", response_model=Union[TrackInfoResponse, ErrorResponse])
async def count_track(
    payload: dict[str, Any] = Depends(get_payload),
    tracker: TimeTracker = Depends(get_tracker),
) -> Union[TrackInfoResponse, ErrorResponse]:
    """Get the total seconds of a track.

    Example:
        >>> POST /api/count
        {"uid": 1, "track": "reading"}
        {"behavior": "TRACKINFO", "track": "Reading", "seconds": 75}
    """
    request = parse_request(TrackRequest, payload)
    if request is None:
        return ErrorResponse(error=INCOMPLETE)

    try:
        track = tracker.get_track(request.uid, request.track)
    except TrackerError as e:
        return ErrorResponse(error=str(e))
    return TrackInfoResponse.from_track(track)
