"""Application context — repositories and services for one process.

Built once in the FastAPI lifespan, stored on ``app.state.context`` and
handed to route handlers through ``Depends(get_context)``. Closed at
shutdown; never rebuilt implicitly.
"""

from dataclasses import dataclass

import structlog

from src.config.settings import Settings
from src.repositories.dashboards import DashboardRepository, InMemoryDashboardRepository
from src.repositories.github import CopilotUsageRepository, GitHubApiRepository
from src.repositories.github_mock import MockGitHubRepository
from src.repositories.metrics import InMemoryMetricRepository, MetricRepository
from src.services.copilot_service import CopilotUsageService
from src.services.dashboard_service import DashboardService
from src.services.metric_service import MetricService

logger = structlog.get_logger(__name__)


@dataclass
class AppContext:
    settings: Settings
    metric_repo: MetricRepository
    dashboard_repo: DashboardRepository
    github_repo: CopilotUsageRepository
    metric_service: MetricService
    dashboard_service: DashboardService
    copilot_service: CopilotUsageService

    async def aclose(self) -> None:
        await self.github_repo.aclose()


def build_github_repository(settings: Settings) -> CopilotUsageRepository:
    """Pick the Copilot usage source the settings ask for.

    Falls back to the mock when the real API is requested without a token.
    """
    if settings.ENABLE_MOCK_API:
        logger.info("github_source_selected", source="mock")
        return MockGitHubRepository()
    if not settings.GITHUB_API_TOKEN:
        logger.warning(
            "github_token_missing",
            detail="GITHUB_API_TOKEN is not set; falling back to mock data.",
        )
        return MockGitHubRepository()
    logger.info("github_source_selected", source="api", url=settings.GITHUB_API_URL)
    return GitHubApiRepository(
        settings.GITHUB_API_TOKEN,
        api_url=settings.GITHUB_API_URL,
        api_version=settings.GITHUB_API_VERSION,
        organization=settings.GITHUB_ORGANIZATION,
    )


def build_context(
    settings: Settings,
    *,
    github_repo: CopilotUsageRepository | None = None,
) -> AppContext:
    metric_repo = InMemoryMetricRepository()
    dashboard_repo = InMemoryDashboardRepository()
    github = github_repo if github_repo is not None else build_github_repository(settings)

    metric_service = MetricService(metric_repo)
    return AppContext(
        settings=settings,
        metric_repo=metric_repo,
        dashboard_repo=dashboard_repo,
        github_repo=github,
        metric_service=metric_service,
        dashboard_service=DashboardService(dashboard_repo, metric_service),
        copilot_service=CopilotUsageService(
            github,
            settings.GITHUB_ORGANIZATION,
            settings.GITHUB_DEFAULT_TEAM_SLUG,
        ),
    )
