"""
Unit tests for backend/main.py
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch

from backend.main import create_app, _init_sentry, _configure_cors, _log_configuration
from backend.settings import Settings


@pytest.fixture
def test_settings() -> Settings:
    return Settings(environment="test", initialize_on_startup=False, _env_file=None)


@pytest.mark.unit
class TestCreateApp:
    """Test the create_app() factory function."""

    def test_create_app_returns_fastapi_instance(self, test_settings):
        """create_app() should return a FastAPI application instance."""
        app = create_app(settings=test_settings)
        assert isinstance(app, FastAPI)

    def test_create_app_uses_default_settings_when_none_provided(self, test_settings):
        """create_app() should use get_settings() when no settings provided."""
        with patch("backend.main.get_settings") as mock_get_settings:
            mock_get_settings.return_value = test_settings

            app = create_app(settings=None)

            mock_get_settings.assert_called_once()
            assert isinstance(app, FastAPI)

    def test_create_app_configures_app_metadata(self, test_settings):
        """create_app() should configure app title and version."""
        app = create_app(settings=test_settings)

        assert app.title == "Exercise Media Resolver API"
        assert app.version == "1.0.0"

    def test_create_app_registers_routes(self, test_settings):
        app = create_app(settings=test_settings)
        paths = {route.path for route in app.routes}

        assert "/health" in paths
        assert "/exercises/resolve" in paths
        assert "/exercises/preload" in paths
        assert "/exercises/{exercise_id}" in paths


@pytest.mark.unit
class TestInitSentry:
    """Test Sentry initialization."""

    def test_init_sentry_skipped_when_no_dsn(self):
        """Sentry should not be initialized when DSN is not set."""
        settings = Settings(sentry_dsn=None, _env_file=None)

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_not_called()

    def test_init_sentry_called_when_dsn_provided(self):
        """Sentry should be initialized when DSN is provided."""
        settings = Settings(
            sentry_dsn="https://test@sentry.io/123",
            environment="test",
            _env_file=None
        )

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_called_once_with(
                dsn="https://test@sentry.io/123",
                environment="test",
                traces_sample_rate=0.1,
                profiles_sample_rate=0.1,
                enable_tracing=True,
            )


@pytest.mark.unit
class TestConfigureCors:
    """Test CORS configuration."""

    def test_configure_cors_adds_middleware(self):
        """_configure_cors should add CORS middleware to the app."""
        app = FastAPI()

        # Before CORS, app has no user-added middleware
        initial_middleware_count = len(app.user_middleware)

        _configure_cors(app)

        # After CORS, app should have one additional middleware
        assert len(app.user_middleware) == initial_middleware_count + 1


@pytest.mark.unit
class TestLogConfiguration:
    """Test startup configuration logging."""

    def test_warns_when_persistence_disabled(self, caplog):
        settings = Settings(cache_snapshot_path="", _env_file=None)

        with caplog.at_level("WARNING"):
            _log_configuration(settings)

        assert "Exercise cache persistence disabled" in caplog.text

    def test_logs_ninjas_status(self, caplog):
        settings = Settings(ninjas_api_key="key", _env_file=None)

        with caplog.at_level("INFO"):
            _log_configuration(settings)

        assert "API Ninjas catalog enabled" in caplog.text


@pytest.mark.unit
class TestLifespan:
    """Startup restores or warms the cache, shutdown persists it."""

    def _resolver(self):
        resolver = MagicMock()
        resolver.initialize = AsyncMock(return_value=True)
        return resolver

    def test_initializes_and_persists(self):
        resolver = self._resolver()
        app = create_app(settings=Settings(environment="test", _env_file=None))
        app.state.exercise_resolver = resolver

        with TestClient(app):
            resolver.initialize.assert_awaited_once()
        resolver.persist.assert_called_once()

    def test_initialization_can_be_disabled(self, test_settings):
        resolver = self._resolver()
        app = create_app(settings=test_settings)
        app.state.exercise_resolver = resolver

        with TestClient(app):
            pass

        resolver.initialize.assert_not_awaited()
        resolver.persist.assert_called_once()

    def test_snapshot_written_to_configured_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        snapshot_path = tmp_path / "custom" / "snap.json"
        settings = Settings(
            environment="test",
            initialize_on_startup=False,
            cache_snapshot_path=str(snapshot_path),
            _env_file=None,
        )

        with TestClient(create_app(settings=settings)):
            pass

        assert snapshot_path.exists()
        assert not (tmp_path / ".cache" / "exercise_cache.json").exists()

    def test_resolver_built_from_app_settings(self, tmp_path):
        settings = Settings(
            environment="test",
            initialize_on_startup=False,
            cache_ttl_days=2,
            cache_snapshot_path=str(tmp_path / "snap.json"),
            _env_file=None,
        )

        app = create_app(settings=settings)

        assert app.state.settings is settings
        assert app.state.exercise_resolver.cache.ttl_seconds == 2 * 24 * 60 * 60
        assert app.state.preload_use_case._resolver is app.state.exercise_resolver

    def test_each_app_has_its_own_resolver(self, test_settings):
        app1 = create_app(settings=test_settings)
        app2 = create_app(settings=test_settings)

        assert app1.state.exercise_resolver is not app2.state.exercise_resolver


@pytest.mark.integration
class TestAppIntegration:
    """Integration tests for the created app."""

    def test_app_can_handle_requests(self, test_settings):
        """Created app should be able to handle HTTP requests."""
        app = create_app(settings=test_settings)

        client = TestClient(app)
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_cors_allows_requests(self, test_settings):
        """CORS should allow cross-origin requests."""
        app = create_app(settings=test_settings)

        client = TestClient(app)
        response = client.get(
            "/health",
            headers={"Origin": "http://localhost:3000"}
        )

        assert response.status_code == 200
        # CORS headers should be present
        assert "access-control-allow-origin" in response.headers


@pytest.mark.unit
class TestMultipleAppInstances:
    """Test that multiple app instances can be created."""

    def test_create_multiple_independent_apps(self):
        """Should be able to create multiple independent app instances."""
        settings1 = Settings(environment="test", _env_file=None)
        settings2 = Settings(environment="production", _env_file=None)

        app1 = create_app(settings=settings1)
        app2 = create_app(settings=settings2)

        # Apps should be different instances
        assert app1 is not app2

        # Both should be valid FastAPI instances
        assert isinstance(app1, FastAPI)
        assert isinstance(app2, FastAPI)
