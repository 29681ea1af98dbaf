"""Pydantic models for API requests and responses.

Request models describe the fields each endpoint requires. Response models
mirror the JSON shapes clients already parse, including the ``behavior`` tag
they dispatch on.
"""

from typing import Any, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator  # type: ignore[import-untyped]

from time_tracker.core.models import Account, Track
from time_tracker.core.storage import INTEGER_MAX, INTEGER_MIN

RequestT = TypeVar("RequestT", bound=BaseModel)

# ============================================================================
# Request Models
# ============================================================================


class CredentialsRequest(BaseModel):
    """Request model for login and registration."""

    username: str = Field(..., min_length=1, description="Login name")
    password: str = Field(..., min_length=1, description="Password")


class AccountRequest(BaseModel):
    """Request model for fetching an account."""

    uid: int = Field(..., ge=INTEGER_MIN, le=INTEGER_MAX, description="Account identifier")


class TrackRequest(BaseModel):
    """Request model addressing one track of an account."""

    uid: int = Field(..., ge=INTEGER_MIN, le=INTEGER_MAX, description="Account identifier")
    track: str = Field(..., min_length=1, description="Track name")


class UpdateTrackRequest(TrackRequest):
    """Request model for adding seconds to a track."""

    seconds: int = Field(..., ge=0, le=INTEGER_MAX, description="Seconds to add")

    @field_validator("seconds", mode="before")
    @classmethod
    def parse_seconds(cls, value: Any) -> Any:
        """Accept whole-number strings and floats from form and JSON bodies."""
        if isinstance(value, str):
            value = value.strip()
            try:
                return int(value)
            except ValueError:
                return float(value) if value else value
        return value


def parse_request(model: type[RequestT], payload: dict[str, Any]) -> Optional[RequestT]:
    """Build a request model from a raw payload.

    Empty strings and nulls count as missing.

    Returns:
        Model instance, or None if a required field is missing or unusable
    """
    present = {key: value for key, value in payload.items() if value not in (None, "")}
    try:
        return model.model_validate(present)
    except ValidationError:
        return None


# ============================================================================
# Response Models
# ============================================================================


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str = Field(..., description="Error message")


class MessageResponse(BaseModel):
    """Response model for plain acknowledgements."""

    message: str


class VersionResponse(BaseModel):
    """Response model for service metadata."""

    behavior: Literal["VERSION"] = "VERSION"
    name: str
    description: str
    version: str


class AuthenticationResponse(BaseModel):
    """Response model for a successful login."""

    behavior: Literal["AUTHENTICATION"] = "AUTHENTICATION"
    username: str
    uid: int

    @classmethod
    def from_account(cls, account: Account) -> "AuthenticationResponse":
        return cls(username=account.username, uid=account.uid)


class TrackSummary(BaseModel):
    """One track inside an account response."""

    track: str
    seconds: int

    @classmethod
    def from_track(cls, track: Track) -> "TrackSummary":
        return cls(**track.to_dict())


class AccountResponse(BaseModel):
    """Response model for account details."""

    model_config = ConfigDict(populate_by_name=True)

    behavior: Literal["ACCOUNT"] = "ACCOUNT"
    user_id: int = Field(..., alias="userId")
    username: str
    tracks: list[TrackSummary] = Field(default_factory=list)

    @classmethod
    def from_account(cls, account: Account, tracks: list[Track]) -> "AccountResponse":
        """Create response from an account and its tracks."""
        return cls(
            user_id=account.uid,
            username=account.username,
            tracks=[TrackSummary.from_track(t) for t in tracks],
        )


class SaveAckResponse(BaseModel):
    """Response model for an accepted track update."""

    # Every field has a default, so only an exact shape may match
    model_config = ConfigDict(extra="forbid")

    behavior: Literal["SAVEACK"] = "SAVEACK"
    message: str = "Saved!"


class TrackInfoResponse(BaseModel):
    """Response model for a track's total."""

    behavior: Literal["TRACKINFO"] = "TRACKINFO"
    track: str
    seconds: int

    @classmethod
    def from_track(cls, track: Track) -> "TrackInfoResponse":
        return cls(track=track.name, seconds=track.seconds)
