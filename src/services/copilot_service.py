"""Copilot usage service — fetch usage snapshots and derive analytics.

Derivations are pure: no mutation of the snapshot, nothing persisted.

Rankings use Python's stable sort, so entries that tie keep the order in
which the snapshot listed them. Efficiency rankings only consider entries
with more than ``MIN_SHOWN_FOR_EFFICIENCY`` suggestions shown.
"""

from collections.abc import Sequence

import structlog

from src.models.copilot import (
    CopilotOrgUsage,
    CopilotRepositoryStats,
    CopilotTeamUsage,
    CopilotUsageMetrics,
    CopilotUsageSnapshot,
    CopilotUserStats,
    DateRangeFilter,
    GitHubOrganization,
    GitHubTeam,
)
from src.repositories.github import CopilotUsageRepository
from src.services.errors import ConfigurationError

logger = structlog.get_logger(__name__)

TOP_N = 5
MIN_SHOWN_FOR_EFFICIENCY = 100

_Ranked = CopilotRepositoryStats | CopilotUserStats


def _rate(numerator: float, denominator: float) -> float:
    """Percentage clamped to [0, 100]; 0 when the denominator is 0."""
    if denominator <= 0:
        return 0.0
    return min(max(numerator / denominator * 100, 0.0), 100.0)


def _per(total: float, count: int) -> float:
    return total / count if count > 0 else 0.0


def most_active(entries: Sequence[_Ranked], limit: int = TOP_N) -> list:
    """Top entries by suggestions shown, descending."""
    return sorted(entries, key=lambda e: e.suggestions.shown, reverse=True)[:limit]


def most_efficient(entries: Sequence[_Ranked], limit: int = TOP_N) -> list:
    """Top entries by acceptance ratio among statistically significant ones."""
    significant = [e for e in entries if e.suggestions.shown > MIN_SHOWN_FOR_EFFICIENCY]
    return sorted(
        significant,
        key=lambda e: e.suggestions.accepted / e.suggestions.shown,
        reverse=True,
    )[:limit]


def calculate_metrics(snapshot: CopilotUsageSnapshot) -> CopilotUsageMetrics:
    """Derive usage/acceptance rates and rankings from a usage snapshot.

    The active count is the aggregated ``active_users`` figure reported with
    the snapshot, not the length of the active-entity list.
    """
    aggregated = snapshot.aggregated
    active = aggregated.active_users
    shown = aggregated.suggestions.shown
    accepted = aggregated.suggestions.accepted

    if active > snapshot.total_with_access or accepted > shown:
        logger.warning(
            "copilot_snapshot_inconsistent",
            active=active,
            total_with_access=snapshot.total_with_access,
            shown=shown,
            accepted=accepted,
        )

    return CopilotUsageMetrics(
        usage_rate=_rate(active, snapshot.total_with_access),
        acceptance_rate=_rate(accepted, shown),
        suggestions_per_active_user=_per(shown, active),
        accepted_suggestions_per_active_user=_per(accepted, active),
        most_active_repositories=most_active(aggregated.repositories),
        most_efficient_repositories=most_efficient(aggregated.repositories),
        most_active_users=most_active(snapshot.users),
        most_efficient_users=most_efficient(snapshot.users),
    )


class CopilotUsageService:
    """Copilot usage queries over a CopilotUsageRepository."""

    def __init__(
        self,
        repository: CopilotUsageRepository,
        default_org: str = "",
        default_team: str = "",
    ) -> None:
        self._repo = repository
        self._default_org = default_org
        self._default_team = default_team

    async def get_organization_usage(
        self,
        org_name: str | None = None,
        date_range: DateRangeFilter | None = None,
    ) -> CopilotOrgUsage:
        return await self._repo.get_organization_usage(
            org_name or self._default_org or None, date_range
        )

    async def get_team_usage(
        self,
        team_slug: str | None = None,
        date_range: DateRangeFilter | None = None,
    ) -> CopilotTeamUsage:
        """Usage of ``team_slug``, or of the configured default team.

        Raises:
            ConfigurationError: no slug given and no default team configured.
        """
        slug = team_slug or self._default_team
        if not slug:
            raise ConfigurationError(
                "GITHUB_DEFAULT_TEAM_SLUG", "No team slug given and no default team configured"
            )
        return await self._repo.get_team_usage(slug, date_range)

    async def get_user_organizations(self) -> list[GitHubOrganization]:
        return await self._repo.get_user_organizations()

    async def get_organization_teams(self, org_name: str | None = None) -> list[GitHubTeam]:
        return await self._repo.get_organization_teams(org_name or self._default_org or None)

    def calculate_metrics(self, snapshot: CopilotUsageSnapshot) -> CopilotUsageMetrics:
        return calculate_metrics(snapshot)
