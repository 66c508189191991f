"""Dashboard service — dashboard CRUD, widget management, default assignment.

Widget additions are validated against the metric service before anything
is written: the first unknown metric id aborts the call and the dashboard
is left untouched.
"""

from typing import Any

import structlog

from src.models.common import WidgetSize, WidgetType
from src.models.dashboard import (
    DASHBOARD_UPDATABLE_FIELDS,
    WIDGET_UPDATABLE_FIELDS,
    Dashboard,
    DashboardFilter,
    Widget,
    WidgetPosition,
    create_dashboard,
    create_widget,
)
from src.repositories.dashboards import DashboardRepository
from src.services.errors import NotFoundError
from src.services.metric_service import MetricService

logger = structlog.get_logger(__name__)


def _merge(model: Any, updates: dict[str, Any], allowed: frozenset[str]) -> Any:
    """Shallow field overwrite restricted to ``allowed`` names."""
    unknown = set(updates) - allowed
    if unknown:
        msg = f"Fields not updatable: {', '.join(sorted(unknown))}"
        raise ValueError(msg)
    data = model.model_dump()
    data.update(updates)
    return type(model).model_validate(data)


class DashboardService:
    """Orchestrate dashboard operations over a DashboardRepository."""

    def __init__(self, repository: DashboardRepository, metric_service: MetricService) -> None:
        self._repo = repository
        self._metrics = metric_service

    async def get_by_id(self, dashboard_id: str) -> Dashboard | None:
        return await self._repo.get(dashboard_id)

    async def get_all(self, dashboard_filter: DashboardFilter | None = None) -> list[Dashboard]:
        return await self._repo.list_all(dashboard_filter)

    async def create(
        self,
        name: str,
        description: str,
        owner: str,
        tags: list[str] | None = None,
        is_default: bool | None = None,
    ) -> Dashboard:
        dashboard = create_dashboard(name, description, owner)
        if tags:
            dashboard.tags = list(tags)
        if is_default is not None:
            dashboard.is_default = is_default

        saved = await self._repo.save(dashboard)
        logger.info("dashboard_created", dashboard_id=saved.id, owner=owner)
        return saved

    async def update(self, dashboard_id: str, updates: dict[str, Any]) -> Dashboard:
        """Overwrite name/description/tags/is_default and bump ``updated_at``.

        Raises:
            NotFoundError: no dashboard has ``dashboard_id``.
            ValueError: ``updates`` names a field that cannot be changed.
        """
        updated = await self._repo.update(
            dashboard_id, lambda d: _merge(d, updates, DASHBOARD_UPDATABLE_FIELDS)
        )
        if updated is None:
            raise NotFoundError("Dashboard", dashboard_id)
        return updated

    async def delete(self, dashboard_id: str) -> bool:
        deleted = await self._repo.delete(dashboard_id)
        if deleted:
            logger.info("dashboard_deleted", dashboard_id=dashboard_id)
        return deleted

    # ------------------------------------------------------------------
    # Widgets
    # ------------------------------------------------------------------

    async def add_widget(
        self,
        dashboard_id: str,
        title: str,
        type: WidgetType,
        size: WidgetSize,
        metric_ids: list[str],
        position: WidgetPosition,
    ) -> Dashboard:
        if await self._repo.get(dashboard_id) is None:
            raise NotFoundError("Dashboard", dashboard_id)

        known = {m.id for m in await self._metrics.get_by_ids(metric_ids)}
        for metric_id in metric_ids:
            if metric_id not in known:
                raise NotFoundError("Metric", metric_id)

        widget = create_widget(title, type, size, metric_ids, position)
        updated = await self._repo.add_widget(dashboard_id, widget)
        if updated is None:
            raise NotFoundError("Dashboard", dashboard_id)
        logger.info("widget_added", dashboard_id=dashboard_id, widget_id=widget.id)
        return updated

    async def update_widget(
        self, dashboard_id: str, widget_id: str, updates: dict[str, Any]
    ) -> Dashboard:
        dashboard = await self._repo.get(dashboard_id)
        if dashboard is None:
            raise NotFoundError("Dashboard", dashboard_id)

        existing = next((w for w in dashboard.widgets if w.id == widget_id), None)
        if existing is None:
            raise NotFoundError("Widget", widget_id, scope="dashboard")

        merged: Widget = _merge(existing, updates, WIDGET_UPDATABLE_FIELDS)
        try:
            updated = await self._repo.replace_widget(dashboard_id, merged)
        except KeyError:
            # removed concurrently between the read and the write
            raise NotFoundError("Widget", widget_id, scope="dashboard") from None
        if updated is None:
            raise NotFoundError("Dashboard", dashboard_id)
        return updated

    async def remove_widget(self, dashboard_id: str, widget_id: str) -> Dashboard:
        """Remove a widget; removing an absent widget is a no-op."""
        updated = await self._repo.remove_widget(dashboard_id, widget_id)
        if updated is None:
            raise NotFoundError("Dashboard", dashboard_id)
        return updated

    # ------------------------------------------------------------------
    # Defaults
    # ------------------------------------------------------------------

    async def set_as_default(self, dashboard_id: str, user_id: str) -> bool:
        return await self._repo.set_default(dashboard_id, user_id)

    async def get_default(self, user_id: str) -> Dashboard | None:
        dashboard_id = await self._repo.get_default_id(user_id)
        if dashboard_id is None:
            return None
        return await self._repo.get(dashboard_id)
