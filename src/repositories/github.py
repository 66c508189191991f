"""Copilot usage sources: the repository contract and the GitHub REST client.

The REST-backed repository performs one request per call with the transport's
default timeout and no retries. Upstream failures propagate as the ``httpx``
exceptions raised by the client; the HTTP boundary maps them to responses.
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx
import structlog

from src.models.copilot import (
    CopilotOrgUsage,
    CopilotTeamUsage,
    DateRangeFilter,
    GitHubOrganization,
    GitHubTeam,
)
from src.services.errors import ConfigurationError

logger = structlog.get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_API_VERSION = "2022-11-28"


class CopilotUsageRepository(ABC):
    """Source of Copilot usage snapshots and GitHub directory listings."""

    @abstractmethod
    async def get_organization_usage(
        self, org_name: str | None, date_range: DateRangeFilter | None = None
    ) -> CopilotOrgUsage: ...

    @abstractmethod
    async def get_team_usage(
        self, team_slug: str, date_range: DateRangeFilter | None = None
    ) -> CopilotTeamUsage: ...

    @abstractmethod
    async def get_user_organizations(self) -> list[GitHubOrganization]: ...

    @abstractmethod
    async def get_organization_teams(self, org_name: str | None = None) -> list[GitHubTeam]: ...

    async def aclose(self) -> None:
        """Release network resources, if any."""


def date_range_params(date_range: DateRangeFilter | None) -> dict[str, str]:
    """Query parameters GitHub expects for a reporting window."""
    if date_range is None:
        return {}
    return {
        "start_time": date_range.start_date.isoformat(),
        "end_time": date_range.end_date.isoformat(),
    }


class GitHubApiRepository(CopilotUsageRepository):
    """Copilot usage read from the GitHub REST API."""

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        api_version: str = DEFAULT_API_VERSION,
        organization: str = "",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not token:
            msg = "A GitHub API token is required for the REST-backed repository."
            raise ValueError(msg)
        self._organization = organization
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=api_url.rstrip("/"))
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": api_version,
        }

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        try:
            resp = await self._client.get(path, params=params or None, headers=self._headers)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("github_request_failed", path=path, error=str(exc))
            raise
        return resp.json()

    def _resolve_org(self, org_name: str | None) -> str:
        org = org_name or self._organization
        if not org:
            raise ConfigurationError(
                "GITHUB_ORGANIZATION", "No GitHub organization given and none configured"
            )
        return org

    async def get_organization_usage(
        self, org_name: str | None, date_range: DateRangeFilter | None = None
    ) -> CopilotOrgUsage:
        org = self._resolve_org(org_name)
        data = await self._get_json(
            f"/orgs/{org}/copilot/usage", date_range_params(date_range)
        )
        return CopilotOrgUsage.model_validate(data)

    async def get_team_usage(
        self, team_slug: str, date_range: DateRangeFilter | None = None
    ) -> CopilotTeamUsage:
        if self._organization:
            path = f"/orgs/{self._organization}/team/{team_slug}/copilot/usage"
        else:
            path = f"/teams/{team_slug}/copilot/usage"
        data = await self._get_json(path, date_range_params(date_range))
        return CopilotTeamUsage.model_validate(data)

    async def get_user_organizations(self) -> list[GitHubOrganization]:
        data = await self._get_json("/user/orgs")
        return [GitHubOrganization(id=o["id"], login=o["login"]) for o in data]

    async def get_organization_teams(self, org_name: str | None = None) -> list[GitHubTeam]:
        org = self._resolve_org(org_name)
        data = await self._get_json(f"/orgs/{org}/teams")
        return [
            GitHubTeam(id=t["id"], slug=t.get("slug"), name=t["name"])
            for t in data
        ]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
