"""Core functionality for time tracking."""

from time_tracker.core.models import Account, Track
from time_tracker.core.storage import Gateway, SQLiteGateway
from time_tracker.core.tracker import TimeTracker

__all__ = ["Account", "Track", "Gateway", "SQLiteGateway", "TimeTracker"]
