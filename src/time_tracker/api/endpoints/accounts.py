"""Account endpoints for login, registration and account details."""

import logging
from typing import Any, Union

from fastapi import APIRouter, Depends  # type: ignore[import-untyped]

from time_tracker.api.dependencies import get_payload, get_tracker
from time_tracker.api.models import (
    AccountRequest,
    AccountResponse,
    AuthenticationResponse,
    CredentialsRequest,
    ErrorResponse,
    MessageResponse,
    parse_request,
)
from time_tracker.core.tracker import TimeTracker, TrackerError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=Union[AuthenticationResponse, ErrorResponse])
async def login(
    payload: dict[str, Any] = Depends(get_payload),
    tracker: TimeTracker = Depends(get_tracker),
) -> Union[AuthenticationResponse, ErrorResponse]:
    """Authenticate with username and password.

    Unknown usernames and wrong passwords produce the same error.

    Example:
        >>> POST /api/login
        {"username": "alice", "password": "secret"}
        {"behavior": "AUTHENTICATION", "username": "Alice", "uid": 1}
    """
    request = parse_request(CredentialsRequest, payload)
    if request is None:
        return ErrorResponse(error="No login data provided.")

    logger.info(f"Login request for {request.username}")

    try:
        account = tracker.login(request.username, request.password)
    except TrackerError as e:
        return ErrorResponse(error=str(e))
    return AuthenticationResponse.from_account(account)


@router.post("/account", response_model=Union[AccountResponse, ErrorResponse])
async def get_account(
    payload: dict[str, Any] = Depends(get_payload),
    tracker: TimeTracker = Depends(get_tracker),
) -> Union[AccountResponse, ErrorResponse]:
    """Get an account profile and its tracks.

    Example:
        >>> POST /api/account
        {"uid": 1}
        {
            "behavior": "ACCOUNT",
            "userId": 1,
            "username": "Alice",
            "tracks": [{"track": "Reading", "seconds": 75}]
        }
    """
    request = parse_request(AccountRequest, payload)
    if request is None:
        return ErrorResponse(error="Did not supply a user id.")

    try:
        account, tracks = tracker.get_account(request.uid)
    except TrackerError as e:
        return ErrorResponse(error=str(e))
    return AccountResponse.from_account(account, tracks)


@router.post("/register", response_model=Union[MessageResponse, ErrorResponse])
async def register(
    payload: dict[str, Any] = Depends(get_payload),
    tracker: TimeTracker = Depends(get_tracker),
) -> Union[MessageResponse, ErrorResponse]:
    """Register a new account.

    Example:
        >>> POST /api/register
        {"username": "alice", "password": "secret"}
        {"message": "Try logging in now! :)"}
    """
    request = parse_request(CredentialsRequest, payload)
    if request is None:
        return ErrorResponse(error="No registration data provided.")

    logger.info(f"Register request for {request.username}")

    try:
        tracker.register(request.username, request.password)
    except TrackerError as e:
        return ErrorResponse(error=str(e))
    return MessageResponse(message="Try logging in now! :)")
