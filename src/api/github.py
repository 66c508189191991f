"""FastAPI GitHub Copilot usage endpoints.

GET /github/copilot/org/{org}      — org usage snapshot + derived metrics
GET /github/copilot/team           — default team usage (GITHUB_DEFAULT_TEAM_SLUG)
GET /github/copilot/team/{team}    — team usage snapshot + derived metrics
GET /github/orgs                   — organizations visible to the token
GET /github/orgs/{org}/teams       — teams of an organization
GET /github/teams                  — teams of the configured organization

``start_time``/``end_time`` are ISO-8601 and only applied when both are
given. Upstream failures are mapped by the handlers in ``src.api.errors``.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from fastapi.exceptions import RequestValidationError

from src.api.dependencies import get_copilot_service
from src.models.common import PulseboardBase
from src.models.copilot import (
    CopilotOrgUsage,
    CopilotTeamUsage,
    CopilotUsageMetrics,
    DateRangeFilter,
    GitHubOrganization,
    GitHubTeam,
)
from src.services.copilot_service import CopilotUsageService

router = APIRouter(prefix="/github", tags=["github"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class OrgUsageResponse(PulseboardBase):
    usage_data: CopilotOrgUsage
    metrics: CopilotUsageMetrics


class TeamUsageResponse(PulseboardBase):
    usage_data: CopilotTeamUsage
    metrics: CopilotUsageMetrics


class OrganizationListResponse(PulseboardBase):
    organizations: list[GitHubOrganization]


class TeamListResponse(PulseboardBase):
    teams: list[GitHubTeam]


def date_range_from_query(
    start_time: datetime | None = Query(None),
    end_time: datetime | None = Query(None),
) -> DateRangeFilter | None:
    if start_time is None or end_time is None:
        return None
    date_range = DateRangeFilter(start_date=start_time, end_date=end_time)
    if date_range.end_date < date_range.start_date:
        raise RequestValidationError(
            [
                {
                    "loc": ("query", "end_time"),
                    "msg": "end_time must not precede start_time",
                    "type": "value_error",
                }
            ]
        )
    return date_range


# ---------------------------------------------------------------------------
# Copilot usage
# ---------------------------------------------------------------------------


@router.get("/copilot/org/{org}", response_model=OrgUsageResponse)
async def get_org_usage(
    org: str,
    date_range: DateRangeFilter | None = Depends(date_range_from_query),
    service: CopilotUsageService = Depends(get_copilot_service),
) -> OrgUsageResponse:
    usage = await service.get_organization_usage(org, date_range)
    return OrgUsageResponse(usage_data=usage, metrics=service.calculate_metrics(usage))


@router.get("/copilot/team", response_model=TeamUsageResponse)
async def get_default_team_usage(
    date_range: DateRangeFilter | None = Depends(date_range_from_query),
    service: CopilotUsageService = Depends(get_copilot_service),
) -> TeamUsageResponse:
    usage = await service.get_team_usage(None, date_range)
    return TeamUsageResponse(usage_data=usage, metrics=service.calculate_metrics(usage))


@router.get("/copilot/team/{team_slug}", response_model=TeamUsageResponse)
async def get_team_usage(
    team_slug: str,
    date_range: DateRangeFilter | None = Depends(date_range_from_query),
    service: CopilotUsageService = Depends(get_copilot_service),
) -> TeamUsageResponse:
    usage = await service.get_team_usage(team_slug, date_range)
    return TeamUsageResponse(usage_data=usage, metrics=service.calculate_metrics(usage))


# ---------------------------------------------------------------------------
# Directory
# ---------------------------------------------------------------------------


@router.get("/orgs", response_model=OrganizationListResponse)
async def list_organizations(
    service: CopilotUsageService = Depends(get_copilot_service),
) -> OrganizationListResponse:
    return OrganizationListResponse(organizations=await service.get_user_organizations())


@router.get("/orgs/{org}/teams", response_model=TeamListResponse)
async def list_org_teams(
    org: str,
    service: CopilotUsageService = Depends(get_copilot_service),
) -> TeamListResponse:
    return TeamListResponse(teams=await service.get_organization_teams(org))


@router.get("/teams", response_model=TeamListResponse)
async def list_teams(
    service: CopilotUsageService = Depends(get_copilot_service),
) -> TeamListResponse:
    return TeamListResponse(teams=await service.get_organization_teams())
