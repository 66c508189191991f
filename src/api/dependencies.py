"""FastAPI dependency injection factories for services.

The application context is built once in the lifespan and kept on
``app.state``. Tests replace ``get_context`` via ``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from src.api.context import AppContext
from src.services.copilot_service import CopilotUsageService
from src.services.dashboard_service import DashboardService
from src.services.metric_service import MetricService


def get_context(request: Request) -> AppContext:
    return request.app.state.context


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


def get_metric_service(ctx: AppContext = Depends(get_context)) -> MetricService:
    return ctx.metric_service


def get_dashboard_service(ctx: AppContext = Depends(get_context)) -> DashboardService:
    return ctx.dashboard_service


def get_copilot_service(ctx: AppContext = Depends(get_context)) -> CopilotUsageService:
    return ctx.copilot_service


# ---------------------------------------------------------------------------
# Query helpers
# ---------------------------------------------------------------------------


def split_csv(value: str | None) -> list[str]:
    """``"a, b,,c"`` -> ``["a", "b", "c"]``."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
