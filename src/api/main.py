"""FastAPI application entry point for Pulseboard.

The application context (repositories + services) is built in the lifespan,
optionally seeded with sample data, and closed at shutdown.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.context import AppContext, build_context
from src.api.dashboards import router as dashboards_router
from src.api.dependencies import get_context
from src.api.errors import register_exception_handlers
from src.api.github import router as github_router
from src.api.metrics import router as metrics_router
from src.config.settings import get_settings
from src.repositories.github import GitHubApiRepository
from src.services.sample_data import seed_sample_data

APP_VERSION = "0.1.0"

settings = get_settings()

_LOG_NAME_TO_LEVEL: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# --- Structured logging ---
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if settings.ENVIRONMENT == "dev"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        _LOG_NAME_TO_LEVEL[settings.LOG_LEVEL.value],
    ),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    context = build_context(settings)
    app.state.context = context
    logger.info(
        "app_started",
        environment=settings.ENVIRONMENT.value,
        github_api=settings.use_github_api,
    )
    if settings.SEED_SAMPLE_DATA:
        await seed_sample_data(context.metric_service, context.dashboard_service)
    try:
        yield
    finally:
        await context.aclose()
        logger.info("app_stopped")


# --- FastAPI app ---
app = FastAPI(
    title="Pulseboard API",
    description="Business metrics dashboards and GitHub Copilot usage analytics.",
    version=APP_VERSION,
    lifespan=lifespan,
)

# --- CORS middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.ENVIRONMENT == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# --- Routers ---
app.include_router(dashboards_router)
app.include_router(metrics_router)
app.include_router(github_router)


# --- Infrastructure Endpoints ---


@app.get("/health")
async def health_check(ctx: AppContext = Depends(get_context)) -> dict:
    """Liveness probe with component checks. Always 200."""
    checks: dict[str, bool] = {"api": True}

    try:
        await ctx.metric_service.count()
        checks["store"] = True
    except Exception as exc:
        logger.warning("health_store_check_failed", error=str(exc))
        checks["store"] = False

    return {
        "status": "ok" if all(checks.values()) else "degraded",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "githubSource": "api" if isinstance(ctx.github_repo, GitHubApiRepository) else "mock",
        "checks": checks,
    }
