"""Tests for GitHub Copilot usage endpoints over the mock source."""

import pytest
from httpx import AsyncClient

from src.config.settings import Settings


class TestCopilotUsage:
    @pytest.mark.anyio
    async def test_org_usage(self, client: AsyncClient) -> None:
        resp = await client.get("/github/copilot/org/acme")
        assert resp.status_code == 200
        data = resp.json()
        assert data["usageData"]["org"] == "acme"
        assert "total_users_with_access" in data["usageData"]
        metrics = data["metrics"]
        assert 0 <= metrics["usageRate"] <= 100
        assert 0 <= metrics["acceptanceRate"] <= 100
        assert len(metrics["mostActiveRepositories"]) <= 5
        assert all(
            r["suggestions"]["shown"] > 100 for r in metrics["mostEfficientRepositories"]
        )

    @pytest.mark.anyio
    async def test_org_usage_date_range(self, client: AsyncClient) -> None:
        resp = await client.get(
            "/github/copilot/org/acme",
            params={"start_time": "2024-01-01T00:00:00Z", "end_time": "2024-01-31T00:00:00Z"},
        )
        assert resp.status_code == 200
        usage = resp.json()["usageData"]
        assert usage["start_time"].startswith("2024-01-01")
        assert usage["end_time"].startswith("2024-01-31")

    @pytest.mark.anyio
    async def test_single_bound_ignored(self, client: AsyncClient) -> None:
        resp = await client.get(
            "/github/copilot/org/acme", params={"start_time": "2024-01-01T00:00:00Z"}
        )
        assert resp.status_code == 200
        assert not resp.json()["usageData"]["start_time"].startswith("2024-01-01")

    @pytest.mark.anyio
    async def test_reversed_range_is_400(self, client: AsyncClient) -> None:
        resp = await client.get(
            "/github/copilot/org/acme",
            params={"start_time": "2024-02-01T00:00:00Z", "end_time": "2024-01-01T00:00:00Z"},
        )
        assert resp.status_code == 400
        data = resp.json()
        assert data["error"] == "Validation error"
        assert data["details"] == [
            {
                "field": "end_time",
                "message": "end_time must not precede start_time",
                "type": "value_error",
            }
        ]

    @pytest.mark.anyio
    async def test_malformed_date_is_400(self, client: AsyncClient) -> None:
        resp = await client.get("/github/copilot/org/acme", params={"start_time": "yesterday"})
        assert resp.status_code == 400
        assert resp.json()["details"][0]["field"] == "start_time"

    @pytest.mark.anyio
    async def test_team_usage(self, client: AsyncClient) -> None:
        resp = await client.get("/github/copilot/team/platform")
        assert resp.status_code == 200
        data = resp.json()
        assert data["usageData"]["team_slug"] == "platform"
        assert "usageRate" in data["metrics"]

    @pytest.mark.anyio
    async def test_team_usage_without_default_team(self, client: AsyncClient) -> None:
        resp = await client.get("/github/copilot/team")
        assert resp.status_code == 500
        error = resp.json()["error"]
        assert error.startswith("Configuration error:")
        assert "GITHUB_DEFAULT_TEAM_SLUG" in error


class TestDefaultTeam:
    @pytest.fixture
    def settings(self) -> Settings:
        return Settings(
            ENABLE_MOCK_API=True,
            SEED_SAMPLE_DATA=False,
            GITHUB_ORGANIZATION="",
            GITHUB_DEFAULT_TEAM_SLUG="platform",
        )

    @pytest.mark.anyio
    async def test_default_team_usage(self, client: AsyncClient) -> None:
        resp = await client.get("/github/copilot/team")
        assert resp.status_code == 200
        assert resp.json()["usageData"]["team_slug"] == "platform"

    @pytest.mark.anyio
    async def test_path_slug_overrides_default(self, client: AsyncClient) -> None:
        resp = await client.get("/github/copilot/team/mobile")
        assert resp.json()["usageData"]["team_slug"] == "mobile"


class TestDirectory:
    @pytest.mark.anyio
    async def test_orgs(self, client: AsyncClient) -> None:
        resp = await client.get("/github/orgs")
        assert resp.status_code == 200
        assert [o["login"] for o in resp.json()["organizations"]][0] == "mock-organization"

    @pytest.mark.anyio
    async def test_org_teams(self, client: AsyncClient) -> None:
        resp = await client.get("/github/orgs/acme/teams")
        assert resp.status_code == 200
        assert len(resp.json()["teams"]) == 5

    @pytest.mark.anyio
    async def test_teams(self, client: AsyncClient) -> None:
        resp = await client.get("/github/teams")
        assert resp.status_code == 200
        assert resp.json()["teams"][0]["slug"] == "engineering"
