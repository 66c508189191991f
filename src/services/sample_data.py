"""Sample data seeding — demo metrics and an operations dashboard.

Creates:
1. Ten operational metrics (API, infrastructure, product)
2. An "Operations Overview" dashboard with widgets bound to them

Idempotent: skips when the metric store already holds data. Called once
from the application lifespan when ``SEED_SAMPLE_DATA`` is enabled.
"""

import structlog

from src.models.common import MetricPeriod, MetricType, WidgetSize, WidgetType
from src.models.dashboard import WidgetPosition
from src.models.metric import MetricThreshold
from src.services.dashboard_service import DashboardService
from src.services.metric_service import MetricService

logger = structlog.get_logger(__name__)

SAMPLE_METRICS = [
    {"key": "api_calls", "name": "API Calls", "type": MetricType.COUNT, "period": MetricPeriod.DAILY, "value": 2_400_000, "owner": "api-team"},
    {"key": "response_time", "name": "Average Response Time", "type": MetricType.DURATION, "period": MetricPeriod.HOURLY, "value": 245, "owner": "api-team", "unit": "ms", "thresholds": (400, 800)},
    {"key": "error_rate", "name": "Error Rate", "type": MetricType.PERCENTAGE, "period": MetricPeriod.DAILY, "value": 0.07, "owner": "api-team", "unit": "%", "thresholds": (1.0, 5.0)},
    {"key": "active_users", "name": "Active Users", "type": MetricType.COUNT, "period": MetricPeriod.DAILY, "value": 45_800, "owner": "user-team"},
    {"key": "cpu_usage", "name": "CPU Usage", "type": MetricType.PERCENTAGE, "period": MetricPeriod.HOURLY, "value": 62, "owner": "infra-team", "unit": "%", "thresholds": (75, 90)},
    {"key": "memory_usage", "name": "Memory Usage", "type": MetricType.PERCENTAGE, "period": MetricPeriod.HOURLY, "value": 78, "owner": "infra-team", "unit": "%", "thresholds": (80, 95)},
    {"key": "storage_usage", "name": "Storage Usage", "type": MetricType.PERCENTAGE, "period": MetricPeriod.DAILY, "value": 45, "owner": "infra-team", "unit": "%", "thresholds": (80, 95)},
    {"key": "network_throughput", "name": "Network Throughput", "type": MetricType.COUNT, "period": MetricPeriod.HOURLY, "value": 1250, "owner": "infra-team", "unit": "Mbps"},
    {"key": "conversion_rate", "name": "Conversion Rate", "type": MetricType.PERCENTAGE, "period": MetricPeriod.DAILY, "value": 3.2, "owner": "marketing-team", "unit": "%"},
    {"key": "average_session_duration", "name": "Avg Session Duration", "type": MetricType.DURATION, "period": MetricPeriod.DAILY, "value": 320, "owner": "user-team", "unit": "s"},
]

SAMPLE_DASHBOARD_NAME = "Operations Overview"
SAMPLE_DASHBOARD_OWNER = "admin"

# (title, widget type, size, metric keys, (x, y, width, height))
SAMPLE_WIDGETS = [
    ("API Calls", WidgetType.COUNTER, WidgetSize.SMALL, ["api_calls"], (0, 0, 3, 2)),
    ("Error Rate", WidgetType.GAUGE, WidgetSize.SMALL, ["error_rate"], (3, 0, 3, 2)),
    ("Response Time", WidgetType.LINE_CHART, WidgetSize.MEDIUM, ["response_time"], (6, 0, 6, 4)),
    ("Resource Usage", WidgetType.BAR_CHART, WidgetSize.LARGE, ["cpu_usage", "memory_usage", "storage_usage"], (0, 4, 12, 4)),
    ("Engagement", WidgetType.TABLE, WidgetSize.MEDIUM, ["active_users", "conversion_rate", "average_session_duration"], (0, 8, 6, 4)),
]


async def seed_sample_data(
    metric_service: MetricService,
    dashboard_service: DashboardService,
) -> dict:
    """Seed demo data unless metrics already exist.

    Returns a summary dict: ``created`` plus the ids that were created.
    """
    if await metric_service.count() > 0:
        logger.info("sample_data_skipped", reason="metrics already present")
        return {"created": False, "metric_ids": [], "dashboard_id": None}

    ids_by_key: dict[str, str] = {}
    for entry in SAMPLE_METRICS:
        thresholds = None
        if "thresholds" in entry:
            warning, critical = entry["thresholds"]
            thresholds = MetricThreshold(warning=warning, critical=critical)
        metric = await metric_service.create(
            entry["key"],
            entry["name"],
            entry["type"],
            entry["period"],
            entry["value"],
            thresholds=thresholds,
            unit=entry.get("unit"),
            owner=entry.get("owner"),
        )
        ids_by_key[metric.key] = metric.id

    dashboard = await dashboard_service.create(
        SAMPLE_DASHBOARD_NAME,
        "Service health, infrastructure load and user engagement at a glance.",
        SAMPLE_DASHBOARD_OWNER,
        tags=["operations", "sample"],
        is_default=True,
    )
    for title, widget_type, size, keys, (x, y, w, h) in SAMPLE_WIDGETS:
        await dashboard_service.add_widget(
            dashboard.id,
            title,
            widget_type,
            size,
            [ids_by_key[k] for k in keys],
            WidgetPosition(x=x, y=y, width=w, height=h),
        )
    await dashboard_service.set_as_default(dashboard.id, SAMPLE_DASHBOARD_OWNER)

    logger.info("sample_data_seeded", metrics=len(ids_by_key), dashboard_id=dashboard.id)
    return {
        "created": True,
        "metric_ids": list(ids_by_key.values()),
        "dashboard_id": dashboard.id,
    }
