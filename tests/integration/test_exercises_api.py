"""
Integration tests for Exercises API endpoints.

Tests the /exercises/* API endpoints with a resolver wired to in-memory
fakes (no catalogs, no snapshot file).
"""
import pytest
from fastapi.testclient import TestClient

from backend.main import app
from api.deps import get_exercise_resolver, get_preload_use_case
from application.use_cases import PreloadExercisesUseCase
from tests.fakes import FakeCatalogGateway, create_resolver, make_record


@pytest.fixture
def gateway():
    return FakeCatalogGateway(records=[
        make_record(
            "0001",
            "Barbell Hip Thrust",
            body_parts=["upper legs"],
            equipment=["barbell"],
            target_muscles=["glutes"],
        ),
        make_record("0160", "Cable Face Pull", body_parts=["shoulders"], equipment=["cable"]),
    ])


@pytest.fixture
def resolver(gateway):
    return create_resolver(gateway=gateway)


@pytest.fixture
def client(resolver):
    """TestClient with the resolver and preload use case overridden."""
    use_case = PreloadExercisesUseCase(resolver=resolver)

    app.dependency_overrides[get_exercise_resolver] = lambda: resolver
    app.dependency_overrides[get_preload_use_case] = lambda: use_case

    yield TestClient(app)

    app.dependency_overrides.clear()


# =============================================================================
# Resolve Endpoint Tests
# =============================================================================


@pytest.mark.integration
class TestResolveEndpoint:
    """Tests for GET /exercises/resolve endpoint."""

    def test_local_mapping(self, client):
        response = client.get("/exercises/resolve", params={"name": "Jumping Jacks"})

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "Jumping Jacks"
        assert data["exercise"]["id"] == "local_jumping_jacks"
        assert data["confidence"] == 1.0
        assert data["match_type"] == "exact"
        assert data["source"] == "local_mapping"
        assert data["degraded"] is False

    def test_remote_catalog(self, client):
        response = client.get("/exercises/resolve", params={"name": "barbell hip thrust"})

        data = response.json()
        assert data["exercise"]["id"] == "0001"
        assert data["source"] == "remote"

    def test_unknown_name_is_degraded(self, client):
        response = client.get("/exercises/resolve", params={"name": "unknown_xyz_exercise_123"})

        assert response.status_code == 200
        data = response.json()
        assert data["degraded"] is True
        assert data["match_type"] == "fallback"
        assert data["source"] == "generated"
        assert data["exercise"]["media_url"]

    def test_missing_name_returns_422(self, client):
        assert client.get("/exercises/resolve").status_code == 422

    def test_empty_name_returns_422(self, client):
        assert client.get("/exercises/resolve", params={"name": ""}).status_code == 422


# =============================================================================
# Preload Endpoint Tests
# =============================================================================


@pytest.mark.integration
class TestPreloadEndpoint:
    """Tests for POST /exercises/preload endpoint."""

    def test_preload_names(self, client):
        response = client.post(
            "/exercises/preload",
            json={"names": ["push ups", "unknown_xyz_exercise_123", "push ups"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert set(data["results"]) == {"push ups", "unknown_xyz_exercise_123"}
        assert data["results"]["push ups"]["source"] == "local_mapping"
        assert data["results"]["unknown_xyz_exercise_123"]["degraded"] is True
        assert data["report"]["total"] == 2
        assert data["report"]["succeeded"] == 2

    def test_preload_workouts(self, client):
        response = client.post(
            "/exercises/preload",
            json={"workouts": [{"exercises": ["Plank", {"name": "Cable Face Pull"}]}]},
        )

        data = response.json()
        assert data["results"]["Cable Face Pull"]["exercise"]["id"] == "0160"
        assert data["results"]["Plank"]["exercise"]["id"] == "local_plank"

    def test_empty_request_returns_422(self, client):
        assert client.post("/exercises/preload", json={}).status_code == 422

    def test_last_preload_in_stats(self, client):
        client.post("/exercises/preload", json={"names": ["plank"]})

        data = client.get("/exercises/stats").json()

        assert data["last_preload"]["total"] == 1


# =============================================================================
# Suggest Endpoint Tests
# =============================================================================


@pytest.mark.integration
class TestSuggestEndpoint:
    """Tests for GET /exercises/suggest endpoint."""

    def test_suggestions(self, client):
        response = client.get("/exercises/suggest", params={"q": "squats", "limit": 3})

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 3
        assert data[0]["exercise"]["name"] == "Squat"
        assert data[0]["similarity"] == 0.833

    def test_limit_validated(self, client):
        assert client.get("/exercises/suggest", params={"q": "squat", "limit": 0}).status_code == 422


# =============================================================================
# Cache Endpoint Tests
# =============================================================================


@pytest.mark.integration
class TestCacheEndpoints:
    """Tests for GET /exercises/stats and DELETE /exercises/cache."""

    def test_stats(self, client):
        client.get("/exercises/resolve", params={"name": "plank"})

        data = client.get("/exercises/stats").json()

        assert data["total"] == 1
        assert data["local_mapping"] == 1
        assert data["last_preload"] is None
        assert data["cache_size"]["exercises"] == 9

    def test_clear_cache(self, client, resolver):
        client.get("/exercises/resolve", params={"name": "barbell hip thrust"})

        response = client.delete("/exercises/cache")

        assert response.status_code == 200
        assert response.json()["status"] == "cleared"
        assert response.json()["cache"]["exercises"] == 9
        assert resolver.cache.get("0001") is None


# =============================================================================
# Browse and Lookup Endpoint Tests
# =============================================================================


@pytest.mark.integration
class TestBrowseEndpoints:
    """Tests for body part and equipment listings."""

    def test_body_parts(self, client):
        data = client.get("/exercises/body-parts").json()
        assert data == {"names": ["shoulders", "upper legs"], "count": 2}

    def test_exercises_by_body_part(self, client):
        data = client.get("/exercises/body-parts/upper legs").json()
        assert data["count"] == 1
        assert data["exercises"][0]["id"] == "0001"

    def test_equipments(self, client):
        data = client.get("/exercises/equipments").json()
        assert data["names"] == ["barbell", "cable"]

    def test_exercises_by_equipment(self, client):
        data = client.get("/exercises/equipments/cable").json()
        assert [e["id"] for e in data["exercises"]] == ["0160"]


@pytest.mark.integration
class TestGetExerciseEndpoint:
    """Tests for GET /exercises/{exercise_id} endpoint."""

    def test_get_existing_exercise_returns_200(self, client):
        response = client.get("/exercises/0001")

        assert response.status_code == 200
        assert response.json()["name"] == "Barbell Hip Thrust"

    def test_get_nonexistent_exercise_returns_404(self, client):
        response = client.get("/exercises/nonexistent")

        assert response.status_code == 404
        assert response.json()["detail"] == "Exercise 'nonexistent' not found"


@pytest.mark.integration
class TestHealthEndpoint:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
