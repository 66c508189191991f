"""Mock Copilot usage source for development and demos.

Generates plausible, randomised usage snapshots. The numbers are not a
contract; pass a ``seed`` for repeatable output.
"""

import random
from datetime import timedelta

import structlog

from src.models.common import utc_now
from src.models.copilot import (
    CopilotAggregatedStats,
    CopilotOrgUsage,
    CopilotRepositoryStats,
    CopilotSuggestionStats,
    CopilotTeamUsage,
    CopilotUser,
    CopilotUserRepositoryStats,
    CopilotUserStats,
    DateRangeFilter,
    GitHubOrganization,
    GitHubTeam,
)
from src.repositories.github import CopilotUsageRepository

logger = structlog.get_logger(__name__)

MOCK_ORG = "mock-organization"
EDITORS = ["VS Code", "Visual Studio", "JetBrains", "Vim", "Neovim"]
REPOSITORIES = [
    (1, "frontend-app"),
    (2, "backend-api"),
    (3, "shared-libs"),
    (4, "internal-tools"),
    (5, "docs-site"),
    (6, "mobile-app"),
]
TEAMS = [
    ("101", "engineering", "Engineering"),
    ("102", "design", "Design"),
    ("103", "product", "Product"),
    ("104", "platform", "Platform"),
    ("105", "devops", "DevOps"),
]

ACTIVE_USER_COUNT = 15
INACTIVE_USER_COUNT = 8
TEAM_ACTIVE_MEMBERS = 5
TEAM_INACTIVE_MEMBERS = 3


def _suggestions(rng: random.Random, low: int, high: int) -> CopilotSuggestionStats:
    shown = rng.randint(low, high)
    # 30-80% acceptance
    accepted = int(shown * (0.3 + rng.random() * 0.5))
    return CopilotSuggestionStats(shown=shown, accepted=accepted)


def _sum_suggestions(stats: list[CopilotSuggestionStats]) -> CopilotSuggestionStats:
    return CopilotSuggestionStats(
        shown=sum(s.shown for s in stats),
        accepted=sum(s.accepted for s in stats),
    )


class MockGitHubRepository(CopilotUsageRepository):
    """Fabricated Copilot usage data shaped like GitHub's responses."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    async def get_organization_usage(
        self, org_name: str | None, date_range: DateRangeFilter | None = None
    ) -> CopilotOrgUsage:
        logger.info("mock_org_usage", org=org_name or MOCK_ORG)
        rng = self._rng
        now = utc_now()
        start = date_range.start_date if date_range else now - timedelta(days=30)
        end = date_range.end_date if date_range else now

        active_users = [
            CopilotUser(
                id=1000 + i,
                login=f"active-user-{i}",
                name=f"Active User {i}",
                last_activity_at=(now - timedelta(days=rng.random() * 7)).isoformat(),
                last_activity_editor=rng.choice(EDITORS),
                active=True,
            )
            for i in range(ACTIVE_USER_COUNT)
        ]
        inactive_users = [
            CopilotUser(
                id=2000 + i,
                login=f"inactive-user-{i}",
                name=f"Inactive User {i}",
                last_activity_at=(now - timedelta(days=30 + rng.random() * 60)).isoformat(),
                active=False,
            )
            for i in range(INACTIVE_USER_COUNT)
        ]

        repo_stats = [
            CopilotRepositoryStats(
                repository_id=repo_id,
                repository_name=name,
                suggestions=_suggestions(rng, 1000, 11000),
                active_users=rng.randint(1, len(active_users)),
            )
            for repo_id, name in REPOSITORIES
        ]

        user_stats = []
        for user in active_users:
            # each user works on 1-4 repos
            picked = rng.sample(REPOSITORIES, rng.randint(1, 4))
            repos = [
                CopilotUserRepositoryStats(
                    repository_id=repo_id,
                    repository_name=name,
                    suggestions=_suggestions(rng, 100, 2100),
                )
                for repo_id, name in picked
            ]
            user_stats.append(
                CopilotUserStats(
                    user_id=user.id,
                    user_login=user.login,
                    suggestions=_sum_suggestions([r.suggestions for r in repos]),
                    repositories=repos,
                )
            )

        total = len(active_users) + len(inactive_users)
        return CopilotOrgUsage(
            org=org_name or MOCK_ORG,
            total_users_with_access=total,
            active_users=active_users,
            inactive_users=inactive_users,
            aggregated=CopilotAggregatedStats(
                suggestions=_sum_suggestions([u.suggestions for u in user_stats]),
                active_users=len(active_users),
                total_users=total,
                inactive_users=len(inactive_users),
                repositories=repo_stats,
            ),
            users=user_stats,
            start_time=start.isoformat(),
            end_time=end.isoformat(),
        )

    async def get_team_usage(
        self, team_slug: str, date_range: DateRangeFilter | None = None
    ) -> CopilotTeamUsage:
        """Team view carved out of a mock organization snapshot."""
        logger.info("mock_team_usage", team=team_slug)
        org = await self.get_organization_usage("mock-org", date_range)

        active_members = org.active_users[:TEAM_ACTIVE_MEMBERS]
        inactive_members = org.inactive_users[:TEAM_INACTIVE_MEMBERS]
        member_ids = {m.id for m in active_members}
        team_users = [u for u in org.users if u.user_id in member_ids]

        team_repo_ids = {r.repository_id for u in team_users for r in u.repositories}
        team_repos = [
            r for r in org.aggregated.repositories if r.repository_id in team_repo_ids
        ]

        total = len(active_members) + len(inactive_members)
        return CopilotTeamUsage(
            team_id=101,
            team_name=team_slug or "Mock Team",
            team_slug=team_slug or "mock-team",
            total_members_with_access=total,
            active_members=active_members,
            inactive_members=inactive_members,
            aggregated=CopilotAggregatedStats(
                suggestions=_sum_suggestions([u.suggestions for u in team_users]),
                active_users=len(active_members),
                total_users=total,
                inactive_users=len(inactive_members),
                repositories=team_repos,
            ),
            users=team_users,
            start_time=org.start_time,
            end_time=org.end_time,
        )

    async def get_user_organizations(self) -> list[GitHubOrganization]:
        return [
            GitHubOrganization(id=1, login=MOCK_ORG),
            GitHubOrganization(id=2, login="mock-open-source"),
        ]

    async def get_organization_teams(self, org_name: str | None = None) -> list[GitHubTeam]:
        return [GitHubTeam(id=tid, slug=slug, name=name) for tid, slug, name in TEAMS]
