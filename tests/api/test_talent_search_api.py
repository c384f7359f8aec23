"""
HTTP tests for the talent search API.

The application runs in-process through httpx's ASGI transport with
application services overridden by in-memory fakes; the lifespan (database
start-up) is not executed.
"""

from unittest.mock import AsyncMock

import httpx
import pytest

from talent_search.api.dependencies import (
    get_analysis,
    get_favorites,
    get_refresh_service,
    get_search_service,
)
from talent_search.application.analysis_service import PlayerAnalysisService
from talent_search.application.embedding_refresh_service import EmbeddingRefreshService
from talent_search.infrastructure.ai.cache_manager import AnalysisCacheManager
from talent_search.main import create_app
from tests.conftest import VALORANT, game_profile, make_player
from tests.mocks.mock_repositories import MockAnalysisRepository
from tests.mocks.mock_services import MockAnalysisGenerator

BASE = "/api/v1/talent-search"
RECRUITER = {"X-Principal-Id": "coach-1", "X-Principal-Role": "recruiter"}
ADMIN = {"X-Principal-Id": "admin-1", "X-Principal-Role": "admin"}
PLAYER = {"X-Principal-Id": "player-1", "X-Principal-Role": "player"}


@pytest.fixture
def seeded(player_repository, embedding_repository, embedding_provider):
    player_repository.add_player(make_player("p1", "Ava", "Stone", games=[game_profile(VALORANT, rank="Gold 1")]))
    player_repository.add_player(make_player("p2", "Ben", "Cole", games=[game_profile(VALORANT)]))
    embedding_repository.put_vector("p1", [1.0, 0.0])
    embedding_provider.register("entry fragger", [1.0, 0.0])


@pytest.fixture
def analysis_service(player_repository, recruiter_repository):
    return PlayerAnalysisService(
        player_repository=player_repository,
        recruiter_repository=recruiter_repository,
        generator=MockAnalysisGenerator(),
        cache=AnalysisCacheManager(repository=MockAnalysisRepository(), ttl_seconds=3600),
    )


@pytest.fixture
def refresh_service(player_repository, embedding_repository, embedding_provider):
    return EmbeddingRefreshService(player_repository, embedding_repository, embedding_provider)


@pytest.fixture
def app(search_service, favorite_service, analysis_service, refresh_service):
    application = create_app()
    application.dependency_overrides[get_search_service] = lambda: search_service
    application.dependency_overrides[get_favorites] = lambda: favorite_service
    application.dependency_overrides[get_analysis] = lambda: analysis_service
    application.dependency_overrides[get_refresh_service] = lambda: refresh_service
    return application


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


class TestAuthentication:
    """Test principal headers and role checks."""

    @pytest.mark.asyncio
    async def test_missing_principal_is_401(self, client):
        response = await client.post(f"{BASE}/search", json={})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_player_role_cannot_search(self, client):
        response = await client.post(f"{BASE}/search", json={}, headers=PLAYER)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_role_is_403(self, client):
        headers = {"X-Principal-Id": "x", "X-Principal-Role": "superuser"}
        response = await client.post(f"{BASE}/search", json={}, headers=headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_recruiter_cannot_refresh_embeddings(self, client):
        response = await client.post(f"{BASE}/embeddings/refresh", headers=RECRUITER)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_cannot_toggle_favorites(self, client):
        response = await client.post(f"{BASE}/favorites/p1/toggle", headers=ADMIN)
        assert response.status_code == 403


class TestSearchEndpoint:
    """Test POST /search."""

    @pytest.mark.asyncio
    async def test_semantic_search(self, client, seeded):
        response = await client.post(f"{BASE}/search", json={"query": "entry fragger"}, headers=RECRUITER)

        assert response.status_code == 200
        body = response.json()
        assert [r["player_id"] for r in body["results"]] == ["p1"]
        assert body["semantic_applied"] is True
        assert body["degraded"] is False
        assert body["results"][0]["is_favorited"] is False

    @pytest.mark.asyncio
    async def test_filter_only_search(self, client, seeded):
        response = await client.post(
            f"{BASE}/search",
            json={"game_id": VALORANT, "class_years": ["2026", " "]},
            headers=RECRUITER,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total_count"] == 2
        assert body["results"][0]["game_profiles"][0]["game_id"] == VALORANT

    @pytest.mark.asyncio
    async def test_admin_can_search(self, client, seeded):
        response = await client.post(f"{BASE}/search", json={}, headers=ADMIN)
        assert response.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"limit": 0},
            {"limit": 101},
            {"min_similarity": 1.5},
            {"min_gpa": 3.5, "max_gpa": 3.0},
            {"school_types": ["ACADEMY"]},
            {"unexpected": True},
            {"query": "x" * 501},
        ],
    )
    async def test_invalid_filters_are_400(self, client, payload):
        response = await client.post(f"{BASE}/search", json=payload, headers=RECRUITER)

        assert response.status_code == 400
        assert response.json()["detail"]

    @pytest.mark.asyncio
    async def test_degraded_search_is_200(self, client, seeded, embedding_repository):
        """Test a vector index outage returns filter-only results flagged as degraded."""
        embedding_repository.should_fail = True

        response = await client.post(f"{BASE}/search", json={"query": "entry fragger"}, headers=RECRUITER)

        assert response.status_code == 200
        body = response.json()
        assert body["degraded"] is True
        assert body["degraded_reason"] == "vector_index_unavailable"
        assert len(body["results"]) == 2

    @pytest.mark.asyncio
    async def test_fatal_failure_is_503(self, client, seeded, player_repository):
        player_repository.should_fail = True

        response = await client.post(f"{BASE}/search", json={}, headers=RECRUITER)

        assert response.status_code == 503


class TestAnalysisEndpoint:
    @pytest.mark.asyncio
    async def test_analysis(self, client, seeded):
        response = await client.get(f"{BASE}/players/p1/analysis", headers=RECRUITER)

        assert response.status_code == 200
        body = response.json()
        assert body["player_id"] == "p1"
        assert "State University" in body["overview"]
        assert body["is_cached"] is False

        again = await client.get(f"{BASE}/players/p1/analysis", headers=RECRUITER)
        assert again.json()["is_cached"] is True

    @pytest.mark.asyncio
    async def test_unknown_player_is_404(self, client, seeded):
        response = await client.get(f"{BASE}/players/missing/analysis", headers=RECRUITER)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unconfigured_analysis_is_503(self, app, client, seeded):
        app.dependency_overrides[get_analysis] = lambda: None

        response = await client.get(f"{BASE}/players/p1/analysis", headers=RECRUITER)

        assert response.status_code == 503


class TestFavoriteEndpoints:
    """Test the favorites ledger routes."""

    @pytest.mark.asyncio
    async def test_toggle_twice(self, client):
        first = await client.post(f"{BASE}/favorites/p1/toggle", headers=RECRUITER)
        second = await client.post(f"{BASE}/favorites/p1/toggle", headers=RECRUITER)

        assert first.json() == {"player_id": "p1", "favorited": True}
        assert second.json() == {"player_id": "p1", "favorited": False}

    @pytest.mark.asyncio
    async def test_upsert_and_list(self, client):
        created = await client.put(
            f"{BASE}/favorites/p1",
            json={"notes": "Great comms", "tags": ["igl"]},
            headers=RECRUITER,
        )
        updated = await client.put(f"{BASE}/favorites/p1", json={"tags": ["igl", "duelist"]}, headers=RECRUITER)
        listing = await client.get(f"{BASE}/favorites", headers=RECRUITER)

        assert created.status_code == 200
        assert updated.json()["notes"] == "Great comms"
        assert updated.json()["tags"] == ["igl", "duelist"]
        assert listing.json()["player_ids"] == ["p1"]
        assert listing.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_upsert_rejects_unknown_fields(self, client):
        response = await client.put(f"{BASE}/favorites/p1", json={"rating": 5}, headers=RECRUITER)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_remove_is_idempotent(self, client):
        await client.post(f"{BASE}/favorites/p1/toggle", headers=RECRUITER)

        first = await client.delete(f"{BASE}/favorites/p1", headers=RECRUITER)
        second = await client.delete(f"{BASE}/favorites/p1", headers=RECRUITER)

        assert first.json()["removed"] is True
        assert second.status_code == 200
        assert second.json()["removed"] is False

    @pytest.mark.asyncio
    async def test_favorite_flag_in_search(self, client, seeded):
        await client.post(f"{BASE}/favorites/p2/toggle", headers=RECRUITER)

        response = await client.post(f"{BASE}/search", json={}, headers=RECRUITER)

        flags = {r["player_id"]: r["is_favorited"] for r in response.json()["results"]}
        assert flags == {"p1": False, "p2": True}


class TestEmbeddingEndpoints:
    """Test admin embedding maintenance."""

    @pytest.mark.asyncio
    async def test_refresh(self, client, seeded, monkeypatch):
        monkeypatch.setattr("talent_search.application.embedding_refresh_service.asyncio.sleep", AsyncMock())

        response = await client.post(
            f"{BASE}/embeddings/refresh",
            json={"mode": "force", "batch_size": 1, "batch_delay_ms": 100},
            headers=ADMIN,
        )

        assert response.status_code == 200
        assert response.json()["succeeded"] == 2

    @pytest.mark.asyncio
    async def test_refresh_rejects_bad_batch_size(self, client):
        response = await client.post(f"{BASE}/embeddings/refresh", json={"batch_size": 500}, headers=ADMIN)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_refresh_unconfigured_is_503(self, app, client, player_repository, embedding_repository):
        app.dependency_overrides[get_refresh_service] = lambda: EmbeddingRefreshService(
            player_repository, embedding_repository, None
        )

        response = await client.post(f"{BASE}/embeddings/refresh", headers=ADMIN)

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_refresh_single_player(self, client, seeded):
        response = await client.post(f"{BASE}/embeddings/players/p2", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["embedding_model"] == "mock-embedding"

        missing = await client.post(f"{BASE}/embeddings/players/nobody", headers=ADMIN)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_refresh_single_player_invalidates_analyses(self, client, seeded):
        """Test re-embedding a player makes the next analysis view regenerate."""
        await client.get(f"{BASE}/players/p1/analysis", headers=RECRUITER)

        response = await client.post(f"{BASE}/embeddings/players/p1", headers=ADMIN)
        analysis = await client.get(f"{BASE}/players/p1/analysis", headers=RECRUITER)

        assert response.json()["analyses_invalidated"] == 1
        assert analysis.json()["is_cached"] is False

    @pytest.mark.asyncio
    async def test_delete_player_embedding(self, client, seeded, embedding_repository):
        await client.get(f"{BASE}/players/p1/analysis", headers=RECRUITER)

        first = await client.delete(f"{BASE}/embeddings/players/p1", headers=ADMIN)
        second = await client.delete(f"{BASE}/embeddings/players/p1", headers=ADMIN)

        assert first.status_code == 200
        assert first.json() == {"player_id": "p1", "deleted": True, "analyses_invalidated": 1}
        assert second.json()["deleted"] is False
        assert "p1" not in embedding_repository.records

    @pytest.mark.asyncio
    async def test_delete_player_embedding_requires_admin(self, client, seeded):
        response = await client.delete(f"{BASE}/embeddings/players/p1", headers=RECRUITER)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_stats(self, client, seeded):
        response = await client.get(f"{BASE}/embeddings/stats", headers=ADMIN)

        assert response.status_code == 200
        assert response.json() == {
            "total_embeddings": 1,
            "missing_embeddings": 1,
            "total_players": 2,
            "coverage_percent": 50.0,
            "is_configured": True,
        }


class TestAvailability:
    @pytest.mark.asyncio
    async def test_availability(self, client):
        response = await client.get(f"{BASE}/availability", headers=RECRUITER)

        assert response.json() == {"semantic_search_configured": True, "analysis_configured": True}
