"""Tests for DashboardService: CRUD, widget integrity, default dashboards."""

import pytest

from src.models.common import MetricPeriod, MetricType, WidgetSize, WidgetType
from src.models.dashboard import DashboardFilter, WidgetPosition
from src.repositories.dashboards import InMemoryDashboardRepository
from src.repositories.metrics import InMemoryMetricRepository
from src.services.dashboard_service import DashboardService
from src.services.errors import NotFoundError
from src.services.metric_service import MetricService

POS = WidgetPosition(x=0, y=0, width=2, height=2)


@pytest.fixture
def metric_service() -> MetricService:
    return MetricService(InMemoryMetricRepository())


@pytest.fixture
def service(metric_service: MetricService) -> DashboardService:
    return DashboardService(InMemoryDashboardRepository(), metric_service)


async def _metric_id(metric_service: MetricService, key: str = "api_calls") -> str:
    m = await metric_service.create(key, key, MetricType.COUNT, MetricPeriod.DAILY, 1)
    return m.id


# ===================================================================
# Dashboards
# ===================================================================


class TestCreate:
    @pytest.mark.anyio
    async def test_create_with_tags_and_default(self, service: DashboardService) -> None:
        d = await service.create("Ops", "desc", "alice", tags=["infra"], is_default=True)
        assert d.widgets == []
        assert d.tags == ["infra"]
        assert d.is_default is True

    @pytest.mark.anyio
    async def test_create_without_optional_fields(self, service: DashboardService) -> None:
        d = await service.create("Ops", "desc", "alice")
        assert d.tags is None
        assert d.is_default is None

    @pytest.mark.anyio
    async def test_get_all_filters(self, service: DashboardService) -> None:
        await service.create("Ops", "", "alice")
        await service.create("Sales", "", "bob")
        got = await service.get_all(DashboardFilter(owner="alice"))
        assert [d.name for d in got] == ["Ops"]


class TestUpdate:
    @pytest.mark.anyio
    async def test_partial_update(self, service: DashboardService) -> None:
        d = await service.create("Ops", "desc", "alice")
        updated = await service.update(d.id, {"name": "Operations", "tags": ["x"]})
        assert updated.name == "Operations"
        assert updated.description == "desc"
        assert updated.tags == ["x"]
        assert updated.updated_at >= d.updated_at

    @pytest.mark.anyio
    async def test_unknown_field_rejected(self, service: DashboardService) -> None:
        d = await service.create("Ops", "desc", "alice")
        with pytest.raises(ValueError):
            await service.update(d.id, {"owner": "mallory"})
        assert (await service.get_by_id(d.id)).owner == "alice"

    @pytest.mark.anyio
    async def test_missing_dashboard(self, service: DashboardService) -> None:
        with pytest.raises(NotFoundError):
            await service.update("nope", {"name": "x"})

    @pytest.mark.anyio
    async def test_delete_is_idempotent(self, service: DashboardService) -> None:
        d = await service.create("Ops", "desc", "alice")
        assert await service.delete(d.id) is True
        assert await service.delete(d.id) is False


# ===================================================================
# Widgets
# ===================================================================


class TestAddWidget:
    @pytest.mark.anyio
    async def test_add_widget(
        self, service: DashboardService, metric_service: MetricService
    ) -> None:
        mid = await _metric_id(metric_service)
        d = await service.create("Ops", "", "alice")
        updated = await service.add_widget(d.id, "Calls", WidgetType.COUNTER, WidgetSize.SMALL, [mid], POS)
        assert len(updated.widgets) == 1
        assert updated.widgets[0].metric_ids == [mid]
        assert updated.widgets[0].config == {}

    @pytest.mark.anyio
    async def test_unknown_metric_aborts(
        self, service: DashboardService, metric_service: MetricService
    ) -> None:
        mid = await _metric_id(metric_service)
        d = await service.create("Ops", "", "alice")
        with pytest.raises(NotFoundError) as exc_info:
            await service.add_widget(
                d.id, "Calls", WidgetType.TABLE, WidgetSize.LARGE, [mid, "ghost", "ghost2"], POS
            )
        assert exc_info.value.entity == "Metric"
        assert exc_info.value.entity_id == "ghost"
        after = await service.get_by_id(d.id)
        assert after.widgets == []
        assert after.updated_at == d.updated_at

    @pytest.mark.anyio
    async def test_missing_dashboard(self, service: DashboardService) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await service.add_widget("nope", "W", WidgetType.GAUGE, WidgetSize.SMALL, [], POS)
        assert exc_info.value.entity == "Dashboard"

    @pytest.mark.anyio
    async def test_widget_order_round_trip(self, service: DashboardService) -> None:
        d = await service.create("Ops", "", "alice")
        for title in ("first", "second", "third"):
            await service.add_widget(d.id, title, WidgetType.COUNTER, WidgetSize.SMALL, [], POS)
        fetched = await service.get_by_id(d.id)
        assert [w.title for w in fetched.widgets] == ["first", "second", "third"]


class TestUpdateWidget:
    @pytest.mark.anyio
    async def test_update_fields(self, service: DashboardService) -> None:
        d = await service.create("Ops", "", "alice")
        d = await service.add_widget(d.id, "W", WidgetType.COUNTER, WidgetSize.SMALL, [], POS)
        wid = d.widgets[0].id
        updated = await service.update_widget(
            d.id, wid, {"title": "Renamed", "position": {"x": 3, "y": 1, "width": 2, "height": 2}}
        )
        widget = updated.widgets[0]
        assert widget.id == wid
        assert widget.title == "Renamed"
        assert widget.position.x == 3
        assert widget.type == WidgetType.COUNTER

    @pytest.mark.anyio
    async def test_missing_widget(self, service: DashboardService) -> None:
        d = await service.create("Ops", "", "alice")
        with pytest.raises(NotFoundError) as exc_info:
            await service.update_widget(d.id, "ghost", {"title": "x"})
        assert exc_info.value.message == "Widget with ID ghost not found on dashboard"

    @pytest.mark.anyio
    async def test_id_not_updatable(self, service: DashboardService) -> None:
        d = await service.create("Ops", "", "alice")
        d = await service.add_widget(d.id, "W", WidgetType.COUNTER, WidgetSize.SMALL, [], POS)
        with pytest.raises(ValueError):
            await service.update_widget(d.id, d.widgets[0].id, {"id": "other"})


class TestRemoveWidget:
    @pytest.mark.anyio
    async def test_remove(self, service: DashboardService) -> None:
        d = await service.create("Ops", "", "alice")
        d = await service.add_widget(d.id, "W", WidgetType.COUNTER, WidgetSize.SMALL, [], POS)
        updated = await service.remove_widget(d.id, d.widgets[0].id)
        assert updated.widgets == []

    @pytest.mark.anyio
    async def test_remove_absent_widget_is_noop(self, service: DashboardService) -> None:
        d = await service.create("Ops", "", "alice")
        updated = await service.remove_widget(d.id, "ghost")
        assert updated.widgets == []

    @pytest.mark.anyio
    async def test_missing_dashboard(self, service: DashboardService) -> None:
        with pytest.raises(NotFoundError):
            await service.remove_widget("nope", "ghost")


# ===================================================================
# Defaults
# ===================================================================


class TestDefaults:
    @pytest.mark.anyio
    async def test_set_and_get(self, service: DashboardService) -> None:
        d = await service.create("Ops", "", "alice")
        assert await service.set_as_default(d.id, "alice") is True
        assert (await service.get_default("alice")).id == d.id

    @pytest.mark.anyio
    async def test_unknown_user(self, service: DashboardService) -> None:
        assert await service.get_default("nobody") is None

    @pytest.mark.anyio
    async def test_delete_clears_default(self, service: DashboardService) -> None:
        d = await service.create("Ops", "", "alice")
        await service.set_as_default(d.id, "alice")
        await service.delete(d.id)
        assert await service.get_default("alice") is None
