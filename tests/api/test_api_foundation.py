"""Tests for API foundation (server, dependencies, models, system endpoints)."""

import tempfile
from pathlib import Path

import pytest  # type: ignore[import-not-found]
from fastapi.testclient import TestClient  # type: ignore[import-untyped]

from time_tracker import __description__, __title__, __version__
from time_tracker.api import create_app
from time_tracker.api.dependencies import get_tracker
from time_tracker.api.models import (
    AccountResponse,
    CredentialsRequest,
    TrackRequest,
    UpdateTrackRequest,
    parse_request,
)
from time_tracker.core.config import ConfigManager
from time_tracker.core.models import Account, Track
from time_tracker.core.storage import Found, SQLiteGateway


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path):
    """Create a test configuration with its own data directory."""
    config = ConfigManager(temp_dir / "config.yml")
    config.set("general.data_dir", str(temp_dir / "data"))
    return config


@pytest.fixture
def test_app(test_config: ConfigManager):
    """Create a test FastAPI application on an in-memory store."""
    return create_app(test_config, gateway=SQLiteGateway.in_memory())


@pytest.fixture
def client(test_app):
    """Create a test client."""
    return TestClient(test_app)


class TestServerCreation:
    """Test FastAPI server creation."""

    def test_create_app_with_config(self, test_config: ConfigManager) -> None:
        """Test creating app with explicit config opens the configured file."""
        app = create_app(test_config)

        assert app.title == "Time Tracker API"
        assert app.version == __version__
        assert test_config.database_path().exists()
        app.state.gateway.close()

    def test_create_app_bootstraps_schema(self, test_app) -> None:  # type: ignore[no-untyped-def]
        """Test that tables exist before any request is served."""
        result = test_app.state.gateway.read(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'tracks'"
        )
        assert isinstance(result, Found)

    def test_app_has_routes(self, test_app, client: TestClient) -> None:  # type: ignore[no-untyped-def]
        """Test that app has expected routes."""
        routes = test_app.openapi()["paths"]
        for path in (
            "/api/version",
            "/api/login",
            "/api/account",
            "/api/register",
            "/api/new",
            "/api/update",
            "/api/delete",
            "/api/count",
        ):
            assert path in routes

        # The overview page is left out of the OpenAPI document
        assert client.get("/api").status_code == 200

    def test_shutdown_closes_gateway(self, test_config: ConfigManager) -> None:
        """Test that stopping the app closes the store."""
        gateway = SQLiteGateway.in_memory()
        app = create_app(test_config, gateway=gateway)

        with TestClient(app):
            assert gateway._closed is False

        assert gateway._closed is True


class TestSystemEndpoints:
    """Test the overview page and version endpoint."""

    def test_version(self, client: TestClient) -> None:
        """Test version metadata."""
        response = client.get("/api/version")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {
            "behavior": "VERSION",
            "name": __title__,
            "description": __description__,
            "version": __version__,
        }

    def test_index_is_html(self, client: TestClient) -> None:
        """Test that /api serves an HTML document."""
        response = client.get("/api")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Time Tracker API" in response.text


class TestDependencies:
    """Test dependency functions."""

    def test_get_tracker_uses_app_gateway(self, test_app) -> None:  # type: ignore[no-untyped-def]
        """Test that handlers share the application's gateway."""

        class FakeRequest:
            app = test_app

        tracker = get_tracker(FakeRequest())  # type: ignore[arg-type]
        assert tracker.gateway is test_app.state.gateway


class TestRequestModels:
    """Test request parsing."""

    def test_missing_field(self) -> None:
        """Test that a missing field fails parsing."""
        assert parse_request(CredentialsRequest, {"username": "alice"}) is None

    def test_empty_string_counts_as_missing(self) -> None:
        """Test that empty strings are not present."""
        assert parse_request(CredentialsRequest, {"username": "alice", "password": ""}) is None

    def test_null_counts_as_missing(self) -> None:
        """Test that nulls are not present."""
        assert parse_request(TrackRequest, {"uid": None, "track": "Reading"}) is None

    def test_form_strings_are_coerced(self) -> None:
        """Test that form values convert to integers."""
        request = parse_request(UpdateTrackRequest, {"uid": "1", "track": "Reading", "seconds": "30"})

        assert request is not None
        assert request.uid == 1
        assert request.seconds == 30

    def test_zero_seconds_is_present(self) -> None:
        """Test that a zero delta is accepted."""
        request = parse_request(UpdateTrackRequest, {"uid": 1, "track": "Reading", "seconds": 0})
        assert request is not None

    @pytest.mark.parametrize("seconds", [-5, "-5", "abc", "1.5", 2.5])
    def test_unusable_seconds(self, seconds) -> None:  # type: ignore[no-untyped-def]
        """Test that negative, fractional and non-numeric deltas fail."""
        assert parse_request(UpdateTrackRequest, {"uid": 1, "track": "R", "seconds": seconds}) is None

    def test_non_integer_uid(self) -> None:
        """Test that a non-numeric uid fails parsing."""
        assert parse_request(TrackRequest, {"uid": "abc", "track": "Reading"}) is None


class TestResponseModels:
    """Test response models."""

    def test_account_response_uses_user_id_alias(self) -> None:
        """Test that the account id is serialized as userId."""
        response = AccountResponse.from_account(
            Account(uid=7, username="alice"), [Track(uid=7, name="Piano", seconds=3)]
        )

        assert response.model_dump(by_alias=True) == {
            "behavior": "ACCOUNT",
            "userId": 7,
            "username": "alice",
            "tracks": [{"track": "Piano", "seconds": 3}],
        }
