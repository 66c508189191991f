"""Tests for Pulseboard domain models: metrics, dashboards, Copilot payloads."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.models.common import MetricPeriod, MetricType, WidgetSize, WidgetType, ensure_utc
from src.models.copilot import (
    CopilotAggregatedStats,
    CopilotOrgUsage,
    CopilotSuggestionStats,
    CopilotTeamUsage,
    DateRangeFilter,
)
from src.models.dashboard import (
    Dashboard,
    DashboardFilter,
    WidgetPosition,
    create_dashboard,
    create_widget,
)
from src.models.metric import Metric, MetricFilter, create_metric


# ===================================================================
# Metric
# ===================================================================


class TestCreateMetric:
    """create_metric seeds history with the initial value."""

    def test_history_seeded(self) -> None:
        m = create_metric("api_calls", "API Calls", MetricType.COUNT, MetricPeriod.DAILY, 10)
        assert len(m.history) == 1
        assert m.history[0].value == 10
        assert m.current_value == 10

    def test_no_previous_or_trend(self) -> None:
        m = create_metric("api_calls", "API Calls", MetricType.COUNT, MetricPeriod.DAILY, 10)
        assert m.previous_value is None
        assert m.trend is None
        assert m.change_percentage is None

    def test_last_updated_matches_history(self) -> None:
        m = create_metric("k", "K", MetricType.COUNT, MetricPeriod.DAILY, 1)
        assert m.metadata.last_updated == m.history[0].timestamp

    def test_ids_unique(self) -> None:
        a = create_metric("a", "A", MetricType.COUNT, MetricPeriod.DAILY, 1)
        b = create_metric("b", "B", MetricType.COUNT, MetricPeriod.DAILY, 1)
        assert a.id != b.id

    def test_empty_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            create_metric("", "Name", MetricType.COUNT, MetricPeriod.DAILY, 1)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_value_rejected(self, value: float) -> None:
        with pytest.raises(ValidationError):
            create_metric("k", "K", MetricType.COUNT, MetricPeriod.DAILY, value)


class TestMetricSerialization:
    def test_camel_case_json(self) -> None:
        m = create_metric("k", "K", MetricType.PERCENTAGE, MetricPeriod.HOURLY, 5)
        data = m.model_dump(mode="json", by_alias=True)
        assert "currentValue" in data
        assert "lastUpdated" in data["metadata"]
        assert data["type"] == "percentage"

    def test_accepts_snake_and_camel(self) -> None:
        payload = {
            "key": "k",
            "type": "count",
            "period": "daily",
            "currentValue": 3,
            "metadata": {"name": "K"},
        }
        assert Metric.model_validate(payload).current_value == 3


class TestMetricFilter:
    def test_blank_search_is_none(self) -> None:
        assert MetricFilter(search="   ").search is None

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MetricFilter(types=["bogus"])

    def test_naive_dates_become_utc(self) -> None:
        f = MetricFilter(from_date=datetime(2024, 1, 1))
        assert f.from_date == datetime(2024, 1, 1, tzinfo=timezone.utc)


# ===================================================================
# Dashboard / Widget
# ===================================================================


class TestCreateDashboard:
    def test_empty_widgets_and_equal_timestamps(self) -> None:
        d = create_dashboard("Ops", "desc", "alice")
        assert d.widgets == []
        assert d.created_at == d.updated_at

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            create_dashboard("", "desc", "alice")


class TestWidget:
    def test_create_widget_copies_metric_ids(self) -> None:
        ids = ["m1", "m2"]
        w = create_widget(
            "Load", WidgetType.LINE_CHART, WidgetSize.MEDIUM, ids,
            WidgetPosition(x=0, y=0, width=4, height=2),
        )
        ids.append("m3")
        assert w.metric_ids == ["m1", "m2"]
        assert w.config == {}

    def test_widget_type_wire_values(self) -> None:
        assert WidgetType.LINE_CHART.value == "lineChart"
        assert WidgetType.STATUS_CARD.value == "statusCard"

    @pytest.mark.parametrize("field,value", [("x", -1), ("width", 0), ("height", 0)])
    def test_position_bounds(self, field: str, value: int) -> None:
        data = {"x": 0, "y": 0, "width": 1, "height": 1, field: value}
        with pytest.raises(ValidationError):
            WidgetPosition(**data)

    def test_dashboard_json_is_camel_case(self) -> None:
        d = Dashboard(name="Ops", owner="alice", is_default=True)
        data = d.model_dump(mode="json", by_alias=True)
        assert data["isDefault"] is True
        assert "createdAt" in data


class TestDashboardFilter:
    def test_defaults(self) -> None:
        f = DashboardFilter()
        assert f.tags == []
        assert f.is_default is None


# ===================================================================
# Copilot payloads
# ===================================================================


def _aggregated(active: int, total: int) -> CopilotAggregatedStats:
    return CopilotAggregatedStats(
        suggestions=CopilotSuggestionStats(shown=10, accepted=5),
        active_users=active,
        total_users=total,
        inactive_users=total - active,
    )


class TestCopilotPayloads:
    def test_org_total_with_access(self) -> None:
        usage = CopilotOrgUsage(
            org="acme",
            total_users_with_access=40,
            aggregated=_aggregated(20, 40),
            start_time="2024-01-01T00:00:00Z",
            end_time="2024-01-31T00:00:00Z",
        )
        assert usage.total_with_access == 40

    def test_team_total_with_access(self) -> None:
        usage = CopilotTeamUsage(
            team_id=7,
            team_name="Platform",
            total_members_with_access=8,
            aggregated=_aggregated(5, 8),
            start_time="2024-01-01T00:00:00Z",
            end_time="2024-01-31T00:00:00Z",
        )
        assert usage.total_with_access == 8

    def test_unknown_upstream_fields_ignored(self) -> None:
        usage = CopilotOrgUsage.model_validate(
            {
                "org": "acme",
                "total_users_with_access": 1,
                "aggregated": _aggregated(1, 1).model_dump(),
                "start_time": "2024-01-01T00:00:00Z",
                "end_time": "2024-01-31T00:00:00Z",
                "brand_new_field": "x",
            }
        )
        assert usage.org == "acme"

    def test_negative_suggestions_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CopilotSuggestionStats(shown=-1, accepted=0)


class TestDateRangeFilter:
    def test_naive_dates_normalized(self) -> None:
        r = DateRangeFilter(start_date=datetime(2024, 1, 1), end_date=datetime(2024, 2, 1))
        assert r.start_date.tzinfo is timezone.utc
        assert ensure_utc(r.end_date) == r.end_date
