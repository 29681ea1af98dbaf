"""Core time tracking engine."""

import logging
from typing import Optional

from time_tracker.core.models import Account, Track
from time_tracker.core.storage import (
    INTEGER_MAX,
    Found,
    Gateway,
    NotFound,
    ReadResult,
    StorageError,
)

logger = logging.getLogger(__name__)


class TrackerError(ValueError):
    """Base class for errors reported back to the client."""

    message = "Request failed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class AuthenticationError(TrackerError):
    message = "Login invalid."


class AccountNotFoundError(TrackerError):
    message = "User with ID not found."


class UsernameConflictError(TrackerError):
    message = "Username conflict."


class TrackConflictError(TrackerError):
    message = "Track name conflict."


class TrackNotFoundError(TrackerError):
    message = "Track not found."


class WriteFailedError(TrackerError):
    message = "Could not save changes."


class TrackTotalTooLargeError(TrackerError):
    message = "Track total too large."


class TimeTracker:
    """Accounts and tracks on top of a persistence gateway."""

    def __init__(self, gateway: Gateway):
        """Initialize time tracker.

        Args:
            gateway: Persistence gateway the tracker reads and writes through
        """
        self.gateway = gateway

    def _lookup(self, query: str, params: dict, error: type[TrackerError]) -> Found:
        """Run a read that must find rows.

        A miss and a storage failure are reported with the same error, so the
        client cannot tell them apart; the failure is still logged.
        """
        try:
            result = self.gateway.read(query, params)
        except StorageError:
            logger.exception("Lookup failed")
            raise error()
        if isinstance(result, NotFound):
            raise error()
        return result

    def _exists(self, query: str, params: dict) -> bool:
        try:
            result: ReadResult = self.gateway.read(query, params)
        except StorageError:
            logger.exception("Existence check failed")
            raise WriteFailedError()
        return isinstance(result, Found)

    def _write(self, batch: list) -> None:
        try:
            self.gateway.write(batch)
        except StorageError:
            logger.exception("Write failed")
            raise WriteFailedError()

    def login(self, username: str, password: str) -> Account:
        """Authenticate a user.

        Args:
            username: Login name, matched case-insensitively
            password: Password, matched exactly

        Returns:
            Matching account

        Raises:
            AuthenticationError: If no account matches both fields
        """
        found = self._lookup(
            "SELECT uid, user FROM accounts WHERE user = :username COLLATE NOCASE AND pass = :password",
            {"username": username, "password": password},
            AuthenticationError,
        )
        account = Account.from_row(found.first)
        logger.info(f"Authenticated user {account.username} ID {account.uid}.")
        return account

    def get_account(self, uid: int) -> tuple[Account, list[Track]]:
        """Get an account and all of its tracks.

        Args:
            uid: Account identifier

        Returns:
            Tuple of (account, tracks). Tracks are empty when none exist or
            the track lookup fails.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        found = self._lookup(
            "SELECT uid, user FROM accounts WHERE uid = :uid",
            {"uid": uid},
            AccountNotFoundError,
        )
        account = Account.from_row(found.first)

        tracks: list[Track] = []
        try:
            result = self.gateway.read(
                "SELECT uid, track, seconds FROM tracks WHERE uid = :uid ORDER BY rowid",
                {"uid": account.uid},
            )
        except StorageError:
            logger.exception(f"Track lookup failed for user ID {account.uid}")
        else:
            if isinstance(result, Found):
                tracks = [Track.from_row(row) for row in result.rows]

        return account, tracks

    def register(self, username: str, password: str) -> None:
        """Register a new account.

        Args:
            username: Login name, unique case-insensitively
            password: Password, stored verbatim

        Raises:
            UsernameConflictError: If the username is taken in any casing
        """
        if self._exists(
            "SELECT uid FROM accounts WHERE user = :username COLLATE NOCASE",
            {"username": username},
        ):
            logger.info(f"Registration rejected, username taken: {username}")
            raise UsernameConflictError()

        self._write(
            [
                (
                    "INSERT INTO accounts (user, pass) VALUES (:username, :password)",
                    {"username": username, "password": password},
                )
            ]
        )
        logger.info(f"Registered user {username}")

    def create_track(self, uid: int, name: str) -> Track:
        """Create a track with zero seconds.

        Args:
            uid: Owning account identifier
            name: Track name

        Returns:
            Created track

        Raises:
            AccountNotFoundError: If the account does not exist
            TrackConflictError: If the account has a track with that name
        """
        self._lookup(
            "SELECT uid FROM accounts WHERE uid = :uid",
            {"uid": uid},
            AccountNotFoundError,
        )
        if self._exists(
            "SELECT uid FROM tracks WHERE uid = :uid AND track = :track COLLATE NOCASE",
            {"uid": uid, "track": name},
        ):
            raise TrackConflictError()

        track = Track(uid=uid, name=name)
        self._write(
            [
                (
                    "INSERT INTO tracks (uid, track, seconds) VALUES (:uid, :track, :seconds)",
                    {"uid": track.uid, "track": track.name, "seconds": track.seconds},
                )
            ]
        )
        logger.info(f"Created track {name!r} for user ID {uid}")
        return track

    def get_track(self, uid: int, name: str) -> Track:
        """Get a track by case-insensitive name.

        Raises:
            TrackNotFoundError: If no such track exists
        """
        found = self._lookup(
            "SELECT uid, track, seconds FROM tracks "
            "WHERE track = :track COLLATE NOCASE AND uid = :uid",
            {"uid": uid, "track": name},
            TrackNotFoundError,
        )
        return Track.from_row(found.first)

    def add_seconds(self, uid: int, name: str, seconds: int) -> None:
        """Add seconds to a track's total.

        The addition runs as a single statement, so concurrent updates to the
        same track never overwrite each other.

        Args:
            uid: Owning account identifier
            name: Track name, matched case-insensitively
            seconds: Non-negative number of seconds to add

        Raises:
            ValueError: If seconds is negative or out of range
            TrackNotFoundError: If no such track exists
            TrackTotalTooLargeError: If the total would leave the INTEGER range
        """
        if seconds < 0:
            raise ValueError("Seconds to add cannot be negative")
        if seconds > INTEGER_MAX:
            raise ValueError("Seconds to add exceed the storable range")

        track = self.get_track(uid, name)
        if track.seconds > INTEGER_MAX - seconds:
            raise TrackTotalTooLargeError()

        # The guard keeps SQLite from promoting an overflowing total to REAL
        self._write(
            [
                (
                    "UPDATE tracks SET seconds = seconds + :seconds "
                    "WHERE track = :track COLLATE NOCASE AND uid = :uid "
                    "AND seconds <= :limit",
                    {
                        "seconds": seconds,
                        "track": name,
                        "uid": uid,
                        "limit": INTEGER_MAX - seconds,
                    },
                )
            ]
        )
        logger.debug(f"Added {seconds}s to track {name!r} for user ID {uid}")

    def delete_track(self, uid: int, name: str) -> None:
        """Delete a track.

        Raises:
            TrackNotFoundError: If no such track exists
        """
        self.get_track(uid, name)
        self._write(
            [
                (
                    "DELETE FROM tracks WHERE track = :track COLLATE NOCASE AND uid = :uid",
                    {"track": name, "uid": uid},
                )
            ]
        )
        logger.info(f"Deleted track {name!r} for user ID {uid}")
