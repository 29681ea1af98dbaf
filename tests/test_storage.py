"""Tests for the persistence gateway."""

import tempfile
from pathlib import Path

import pytest  # type: ignore[import-not-found]

from time_tracker.core.storage import Found, NotFound, SQLiteGateway, StorageError


@pytest.fixture
def gateway() -> SQLiteGateway:
    """Create an initialized in-memory gateway."""
    gateway = SQLiteGateway.in_memory()
    gateway.initialize()
    yield gateway
    gateway.close()


class TestSchemaBootstrap:
    """Test table creation."""

    def test_initialize_creates_tables(self, gateway: SQLiteGateway) -> None:
        """Test that both tables exist after initialization."""
        result = gateway.read(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name IN ('accounts', 'tracks') "
            "ORDER BY name"
        )

        assert isinstance(result, Found)
        assert [row["name"] for row in result.rows] == ["accounts", "tracks"]

    def test_initialize_is_idempotent(self, gateway: SQLiteGateway) -> None:
        """Test that bootstrapping twice keeps existing data."""
        gateway.write([("INSERT INTO accounts (user, pass) VALUES (:u, :p)", {"u": "alice", "p": "x"})])
        gateway.initialize()

        result = gateway.read("SELECT user FROM accounts")
        assert isinstance(result, Found)
        assert result.first["user"] == "alice"

    def test_file_database_persists(self) -> None:
        """Test that data survives reopening a file-backed database."""
        with tempfile.TemporaryDirectory() as tmpdir:
            url = f"sqlite:///{Path(tmpdir) / 'tracker.sqlite3'}"

            first = SQLiteGateway(url)
            first.initialize()
            first.write([("INSERT INTO tracks (uid, track, seconds) VALUES (1, 'Piano', 5)", {})])
            first.close()

            second = SQLiteGateway(url)
            second.initialize()
            result = second.read("SELECT seconds FROM tracks WHERE track = 'Piano'")
            second.close()

            assert isinstance(result, Found)
            assert result.first["seconds"] == 5


class TestRead:
    """Test gateway reads."""

    def test_empty_result_is_not_found(self, gateway: SQLiteGateway) -> None:
        """Test that zero rows are reported as NotFound."""
        result = gateway.read("SELECT * FROM accounts WHERE uid = :uid", {"uid": 42})
        assert isinstance(result, NotFound)

    def test_rows_are_dictionaries(self, gateway: SQLiteGateway) -> None:
        """Test that found rows map column names to values."""
        gateway.write(
            [
                ("INSERT INTO tracks (uid, track, seconds) VALUES (:uid, :t, :s)", {"uid": 1, "t": "A", "s": 1}),
                ("INSERT INTO tracks (uid, track, seconds) VALUES (:uid, :t, :s)", {"uid": 1, "t": "B", "s": 2}),
            ]
        )

        result = gateway.read("SELECT track, seconds FROM tracks WHERE uid = 1 ORDER BY rowid")

        assert isinstance(result, Found)
        assert result.rows == [{"track": "A", "seconds": 1}, {"track": "B", "seconds": 2}]
        assert result.first == {"track": "A", "seconds": 1}

    def test_broken_query_raises_storage_error(self, gateway: SQLiteGateway) -> None:
        """Test that store failures are not reported as NotFound."""
        with pytest.raises(StorageError, match="Read failed"):
            gateway.read("SELECT * FROM missing_table")

    def test_unbindable_parameter_raises_storage_error(self, gateway: SQLiteGateway) -> None:
        """Test that an integer outside the INTEGER range fails as a store error."""
        with pytest.raises(StorageError, match="Read failed"):
            gateway.read("SELECT * FROM accounts WHERE uid = :uid", {"uid": 10**20})


class TestWrite:
    """Test gateway writes."""

    def test_statements_run_in_order(self, gateway: SQLiteGateway) -> None:
        """Test that later statements see earlier ones."""
        gateway.write(
            [
                ("INSERT INTO tracks (uid, track, seconds) VALUES (1, 'A', 10)", {}),
                ("UPDATE tracks SET seconds = seconds * 2 WHERE track = 'A'", {}),
            ]
        )

        result = gateway.read("SELECT seconds FROM tracks")
        assert isinstance(result, Found)
        assert result.first["seconds"] == 20

    def test_failed_statement_keeps_earlier_writes(self, gateway: SQLiteGateway) -> None:
        """Test that a failing batch is not rolled back as a whole."""
        with pytest.raises(StorageError, match="Write 2 of 3 failed"):
            gateway.write(
                [
                    ("INSERT INTO tracks (uid, track, seconds) VALUES (1, 'A', 0)", {}),
                    ("INSERT INTO missing_table VALUES (1)", {}),
                    ("INSERT INTO tracks (uid, track, seconds) VALUES (1, 'B', 0)", {}),
                ]
            )

        result = gateway.read("SELECT track FROM tracks ORDER BY rowid")
        assert isinstance(result, Found)
        assert [row["track"] for row in result.rows] == ["A"]

    def test_unbindable_parameter_fails_write(self, gateway: SQLiteGateway) -> None:
        """Test that an oversized integer fails the statement instead of escaping."""
        with pytest.raises(StorageError, match="Write 1 of 1 failed"):
            gateway.write(
                [("INSERT INTO tracks (uid, track, seconds) VALUES (1, 'A', :s)", {"s": 10**20})]
            )

    def test_close_is_idempotent(self) -> None:
        """Test that closing twice is harmless."""
        gateway = SQLiteGateway.in_memory()
        gateway.close()
        gateway.close()
