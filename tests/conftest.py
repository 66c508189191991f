"""Shared pytest fixtures for the Pulseboard test suite.

Provides:
- anyio_backend: run async tests on asyncio only
- settings: mock GitHub source, no sample seeding
- context: fresh in-memory AppContext per test
- client: AsyncClient with get_context overridden to use the test context
"""

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.context import AppContext, build_context
from src.api.dependencies import get_context
from src.config.settings import Settings
from src.repositories.github_mock import MockGitHubRepository


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENABLE_MOCK_API=True,
        SEED_SAMPLE_DATA=False,
        GITHUB_ORGANIZATION="",
        GITHUB_DEFAULT_TEAM_SLUG="",
    )


@pytest.fixture
def context(settings: Settings) -> AppContext:
    """In-memory context with a deterministic mock GitHub source."""
    return build_context(settings, github_repo=MockGitHubRepository(seed=42))


@pytest.fixture
async def client(context: AppContext):
    """AsyncClient whose requests see ``context`` instead of the lifespan one."""
    from src.api.main import app

    app.dependency_overrides[get_context] = lambda: context

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
