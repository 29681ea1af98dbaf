"""SQLite persistence gateway with serialized reads and writes."""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# A statement is a query plus its named parameters
Statement = tuple[str, Mapping[str, Any]]

# Range of a SQLite INTEGER column
INTEGER_MIN = -(2**63)
INTEGER_MAX = 2**63 - 1

SCHEMA: list[Statement] = [
    (
        "CREATE TABLE IF NOT EXISTS accounts "
        "(uid INTEGER PRIMARY KEY AUTOINCREMENT, user TEXT, pass TEXT)",
        {},
    ),
    ("CREATE TABLE IF NOT EXISTS tracks (uid INTEGER, track TEXT, seconds INTEGER)", {}),
]


class StorageError(Exception):
    """Raised when the store fails to execute a statement."""


@dataclass(frozen=True)
class Found:
    """Read result holding at least one row."""

    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def first(self) -> dict[str, Any]:
        """First row of the result."""
        return self.rows[0]


@dataclass(frozen=True)
class NotFound:
    """Read result for a query that matched no rows."""

    query: str = ""


ReadResult = Union[Found, NotFound]


class Gateway(ABC):
    """Base class for persistence gateways.

    A gateway exposes exactly two operations: a read that reports an empty
    result as ``NotFound`` and a batch write whose statements run in order.
    """

    @abstractmethod
    def read(self, query: str, params: Optional[Mapping[str, Any]] = None) -> ReadResult:
        """Execute a parameterized read.

        Args:
            query: SQL query with named parameters
            params: Parameter values

        Returns:
            ``Found`` with the rows, or ``NotFound`` if there were none

        Raises:
            StorageError: If the store fails to run the query
        """
        pass

    @abstractmethod
    def write(self, batch: Sequence[Statement]) -> None:
        """Execute write statements in order.

        Each statement commits on its own. A failure stops the batch but does
        not roll back statements that already completed.

        Args:
            batch: Sequence of ``(query, params)`` pairs

        Raises:
            StorageError: If a statement fails
        """
        pass

    def initialize(self) -> None:
        """Create the ``accounts`` and ``tracks`` tables if missing."""
        self.write(SCHEMA)

    def close(self) -> None:
        """Release the underlying store."""
        pass


class SQLiteGateway(Gateway):
    """Gateway over a single shared SQLite connection."""

    def __init__(self, database_url: str = "sqlite:///timetracker.sqlite3"):
        """Initialize gateway.

        Args:
            database_url: SQLAlchemy URL of the SQLite database
        """
        self.database_url = database_url
        # One connection for the whole process, shared across worker threads
        self.engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def in_memory(cls) -> "SQLiteGateway":
        """Create a gateway backed by a private in-memory database."""
        return cls("sqlite://")

    def read(self, query: str, params: Optional[Mapping[str, Any]] = None) -> ReadResult:
        """Execute a parameterized read."""
        with self._lock:
            try:
                with self.engine.connect() as conn:
                    rows = [dict(row) for row in conn.execute(text(query), dict(params or {})).mappings()]
            except (SQLAlchemyError, OverflowError) as e:
                raise StorageError(f"Read failed: {e}") from e

        if not rows:
            return NotFound(query)
        return Found(rows)

    def write(self, batch: Sequence[Statement]) -> None:
        """Execute write statements in order, one transaction each."""
        with self._lock:
            for index, (query, params) in enumerate(batch):
                try:
                    with self.engine.begin() as conn:
                        conn.execute(text(query), dict(params))
                except (SQLAlchemyError, OverflowError) as e:
                    raise StorageError(
                        f"Write {index + 1} of {len(batch)} failed: {e}"
                    ) from e

    def close(self) -> None:
        """Dispose of the engine and its connection."""
        with self._lock:
            if self._closed:
                return
            self.engine.dispose()
            self._closed = True
            logger.info(f"Closed database {self.database_url}")
