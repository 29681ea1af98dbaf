"""Core data models for time tracking."""

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass
class Account:
    """Registered user.

    Attributes:
        uid: Identifier assigned by the store on registration
        username: Login name as it was registered
        password: Password, stored and compared verbatim
    """

    uid: int
    username: str
    password: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Account":
        """Create account from an ``accounts`` row.

        Args:
            row: Row mapping with ``uid``, ``user`` and optionally ``pass``

        Returns:
            Account instance
        """
        return cls(uid=int(row["uid"]), username=row["user"], password=row.get("pass") or "")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary without the password."""
        return {"uid": self.uid, "username": self.username}


@dataclass
class Track:
    """Named activity with an accumulated number of seconds.

    Attributes:
        uid: Owning account identifier
        name: Track name (unique per account, case-insensitive)
        seconds: Total seconds logged against the track
    """

    uid: int
    name: str
    seconds: int = 0

    def __post_init__(self) -> None:
        """Validate track data."""
        if self.seconds < 0:
            raise ValueError("Track seconds cannot be negative")

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Track":
        """Create track from a ``tracks`` row."""
        return cls(uid=int(row["uid"]), name=row["track"], seconds=int(row["seconds"] or 0))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ``{track, seconds}`` shape clients expect."""
        return {"track": self.name, "seconds": self.seconds}
