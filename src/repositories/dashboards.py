"""Dashboard repository: dashboards, their widgets, and user default assignments."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable

from src.models.common import utc_now
from src.models.dashboard import Dashboard, DashboardFilter, Widget
from src.repositories.base import EntityStore, InMemoryEntityStore


class DashboardRepository(ABC):
    """Dashboard persistence contract.

    Widget operations return ``None`` when the dashboard does not exist.
    """

    @abstractmethod
    async def get(self, dashboard_id: str) -> Dashboard | None: ...

    @abstractmethod
    async def list_all(self, dashboard_filter: DashboardFilter | None = None) -> list[Dashboard]: ...

    @abstractmethod
    async def save(self, dashboard: Dashboard) -> Dashboard: ...

    @abstractmethod
    async def update(
        self, dashboard_id: str, mutate: Callable[[Dashboard], Dashboard]
    ) -> Dashboard | None: ...

    @abstractmethod
    async def delete(self, dashboard_id: str) -> bool: ...

    @abstractmethod
    async def add_widget(self, dashboard_id: str, widget: Widget) -> Dashboard | None: ...

    @abstractmethod
    async def replace_widget(self, dashboard_id: str, widget: Widget) -> Dashboard | None: ...

    @abstractmethod
    async def remove_widget(self, dashboard_id: str, widget_id: str) -> Dashboard | None: ...

    @abstractmethod
    async def set_default(self, dashboard_id: str, user_id: str) -> bool: ...

    @abstractmethod
    async def get_default_id(self, user_id: str) -> str | None: ...


def matches_filter(dashboard: Dashboard, dashboard_filter: DashboardFilter) -> bool:
    if dashboard_filter.owner and dashboard.owner != dashboard_filter.owner:
        return False
    if (
        dashboard_filter.is_default is not None
        and bool(dashboard.is_default) != dashboard_filter.is_default
    ):
        return False
    if dashboard_filter.search:
        needle = dashboard_filter.search.lower()
        if needle not in dashboard.name.lower() and needle not in dashboard.description.lower():
            return False
    if dashboard_filter.tags:
        wanted = set(dashboard_filter.tags)
        if not any(tag in wanted for tag in dashboard.tags or []):
            return False
    return True


def _touch(dashboard: Dashboard) -> Dashboard:
    dashboard.updated_at = utc_now()
    return dashboard


class InMemoryDashboardRepository(DashboardRepository):
    def __init__(self, store: EntityStore[Dashboard] | None = None) -> None:
        self._store = store if store is not None else InMemoryEntityStore[Dashboard]()
        self._user_defaults: dict[str, str] = {}
        self._defaults_lock = asyncio.Lock()

    async def get(self, dashboard_id: str) -> Dashboard | None:
        return await self._store.get(dashboard_id)

    async def list_all(self, dashboard_filter: DashboardFilter | None = None) -> list[Dashboard]:
        dashboards = await self._store.list_all()
        if dashboard_filter is None:
            return dashboards
        return [d for d in dashboards if matches_filter(d, dashboard_filter)]

    async def save(self, dashboard: Dashboard) -> Dashboard:
        return await self._store.save(_touch(dashboard.model_copy(deep=True)))

    async def update(
        self, dashboard_id: str, mutate: Callable[[Dashboard], Dashboard]
    ) -> Dashboard | None:
        return await self._store.update(dashboard_id, lambda d: _touch(mutate(d)))

    async def delete(self, dashboard_id: str) -> bool:
        async with self._defaults_lock:
            for user_id in [u for u, d in self._user_defaults.items() if d == dashboard_id]:
                del self._user_defaults[user_id]
            return await self._store.delete(dashboard_id)

    async def add_widget(self, dashboard_id: str, widget: Widget) -> Dashboard | None:
        def _append(dashboard: Dashboard) -> Dashboard:
            dashboard.widgets.append(widget.model_copy(deep=True))
            return dashboard

        return await self.update(dashboard_id, _append)

    async def replace_widget(self, dashboard_id: str, widget: Widget) -> Dashboard | None:
        def _replace(dashboard: Dashboard) -> Dashboard:
            for index, existing in enumerate(dashboard.widgets):
                if existing.id == widget.id:
                    dashboard.widgets[index] = widget.model_copy(deep=True)
                    return dashboard
            raise KeyError(widget.id)

        return await self.update(dashboard_id, _replace)

    async def remove_widget(self, dashboard_id: str, widget_id: str) -> Dashboard | None:
        def _remove(dashboard: Dashboard) -> Dashboard:
            dashboard.widgets = [w for w in dashboard.widgets if w.id != widget_id]
            return dashboard

        return await self.update(dashboard_id, _remove)

    async def set_default(self, dashboard_id: str, user_id: str) -> bool:
        # existence check and assignment share the lock taken by delete()
        async with self._defaults_lock:
            if await self._store.get(dashboard_id) is None:
                return False
            self._user_defaults[user_id] = dashboard_id
            return True

    async def get_default_id(self, user_id: str) -> str | None:
        async with self._defaults_lock:
            return self._user_defaults.get(user_id)
