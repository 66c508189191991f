"""GitHub Copilot usage models.

Snapshot shapes follow GitHub's Copilot usage summaries for organization
members and for teams:
- https://docs.github.com/en/rest/copilot/copilot-usage

Snapshots are read-only; they live for the request that produced them.
The aggregated ``active_users`` count and the length of the active-entity
list are reported independently and are not required to agree.
"""

from datetime import datetime

from pydantic import Field, field_validator

from src.models.common import GitHubPayload, PulseboardBase, ensure_utc


# ---------------------------------------------------------------------------
# Snapshot building blocks
# ---------------------------------------------------------------------------


class CopilotUser(GitHubPayload):
    id: int
    login: str
    name: str | None = None
    last_activity_at: str
    last_activity_editor: str | None = None
    active: bool


class CopilotSuggestionStats(GitHubPayload):
    shown: int = Field(ge=0)
    accepted: int = Field(ge=0)
    acceptance_rate: float | None = None


class CopilotRepositoryStats(GitHubPayload):
    repository_id: int
    repository_name: str
    suggestions: CopilotSuggestionStats
    active_users: int = 0


class CopilotUserRepositoryStats(GitHubPayload):
    repository_id: int
    repository_name: str
    suggestions: CopilotSuggestionStats


class CopilotUserStats(GitHubPayload):
    user_id: int
    user_login: str
    suggestions: CopilotSuggestionStats
    repositories: list[CopilotUserRepositoryStats] = Field(default_factory=list)


class CopilotAggregatedStats(GitHubPayload):
    suggestions: CopilotSuggestionStats
    active_users: int = 0
    total_users: int = 0
    inactive_users: int = 0
    repositories: list[CopilotRepositoryStats] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Org / team snapshots
# ---------------------------------------------------------------------------


class CopilotOrgUsage(GitHubPayload):
    """Copilot usage summary for an organization."""

    org: str
    total_users_with_access: int = 0
    active_users: list[CopilotUser] = Field(default_factory=list)
    inactive_users: list[CopilotUser] = Field(default_factory=list)
    aggregated: CopilotAggregatedStats
    users: list[CopilotUserStats] = Field(default_factory=list)
    start_time: str
    end_time: str

    @property
    def total_with_access(self) -> int:
        """Seats with access; the aggregated total stands in when omitted."""
        return self.total_users_with_access or self.aggregated.total_users


class CopilotTeamUsage(GitHubPayload):
    """Copilot usage summary for a team."""

    team_id: int | str
    team_name: str
    team_slug: str | None = None
    total_members_with_access: int = 0
    active_members: list[CopilotUser] = Field(default_factory=list)
    inactive_members: list[CopilotUser] = Field(default_factory=list)
    aggregated: CopilotAggregatedStats
    users: list[CopilotUserStats] = Field(default_factory=list)
    start_time: str
    end_time: str

    @property
    def total_with_access(self) -> int:
        return self.total_members_with_access or self.aggregated.total_users


CopilotUsageSnapshot = CopilotOrgUsage | CopilotTeamUsage


# ---------------------------------------------------------------------------
# Directory listings
# ---------------------------------------------------------------------------


class GitHubOrganization(GitHubPayload):
    id: int
    login: str


class GitHubTeam(GitHubPayload):
    id: int | str
    slug: str | None = None
    name: str


# ---------------------------------------------------------------------------
# Query / derived results
# ---------------------------------------------------------------------------


class DateRangeFilter(PulseboardBase):
    """Reporting window passed through to the usage source as-is."""

    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalize_tz(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class CopilotUsageMetrics(PulseboardBase):
    """Secondary analytics derived from a usage snapshot."""

    usage_rate: float = 0.0
    acceptance_rate: float = 0.0
    suggestions_per_active_user: float = 0.0
    accepted_suggestions_per_active_user: float = 0.0
    most_active_repositories: list[CopilotRepositoryStats] = Field(default_factory=list)
    most_efficient_repositories: list[CopilotRepositoryStats] = Field(default_factory=list)
    most_active_users: list[CopilotUserStats] = Field(default_factory=list)
    most_efficient_users: list[CopilotUserStats] = Field(default_factory=list)
