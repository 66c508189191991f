"""Metric service — CRUD, trend derivation and threshold checks.

Trend rule: a change within ±1% of the previous value is ``stable`` so
noise does not flip the trend; a previous value of 0 yields a change of 0.
"""

from datetime import datetime

import structlog

from src.models.common import MetricPeriod, MetricType, TrendDirection, utc_now
from src.models.metric import (
    Metric,
    MetricFilter,
    MetricThreshold,
    MetricValue,
    ThresholdStatus,
    create_metric,
)
from src.repositories.metrics import MetricRepository
from src.services.errors import NotFoundError

logger = structlog.get_logger(__name__)

TREND_DEAD_ZONE_PCT = 1.0


def compute_change_percentage(previous: float, new: float) -> float:
    if previous == 0:
        return 0.0
    return (new - previous) / abs(previous) * 100


def derive_trend(change_percentage: float) -> TrendDirection:
    if change_percentage > TREND_DEAD_ZONE_PCT:
        return TrendDirection.UP
    if change_percentage < -TREND_DEAD_ZONE_PCT:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


def apply_new_value(metric: Metric, new_value: float) -> Metric:
    """Record ``new_value`` on ``metric`` in place and return it."""
    now = utc_now()
    previous = metric.current_value
    change = compute_change_percentage(previous, new_value)

    metric.previous_value = previous
    metric.current_value = new_value
    metric.change_percentage = change
    metric.trend = derive_trend(change)
    metric.history.append(MetricValue(value=new_value, timestamp=now))
    metric.metadata.last_updated = now
    return metric


class MetricService:
    """Orchestrate metric operations over a MetricRepository."""

    def __init__(self, repository: MetricRepository) -> None:
        self._repo = repository

    async def get_by_id(self, metric_id: str) -> Metric | None:
        return await self._repo.get(metric_id)

    async def get_by_ids(self, metric_ids: list[str]) -> list[Metric]:
        return await self._repo.get_by_ids(metric_ids)

    async def get_all(self, metric_filter: MetricFilter | None = None) -> list[Metric]:
        return await self._repo.list_all(metric_filter)

    async def count(self) -> int:
        return await self._repo.count()

    async def create(
        self,
        key: str,
        name: str,
        type: MetricType,
        period: MetricPeriod,
        initial_value: float,
        description: str | None = None,
        thresholds: MetricThreshold | None = None,
        *,
        unit: str | None = None,
        owner: str | None = None,
        data_source: str | None = None,
        target_value: float | None = None,
    ) -> Metric:
        metric = create_metric(key, name, type, period, initial_value)
        if description:
            metric.metadata.description = description
        metric.metadata.unit = unit
        metric.metadata.owner = owner
        metric.metadata.data_source = data_source
        if thresholds is not None:
            metric.thresholds = thresholds
        metric.target_value = target_value

        saved = await self._repo.save(metric)
        logger.info("metric_created", metric_id=saved.id, key=saved.key)
        return saved

    async def update_value(self, metric_id: str, new_value: float) -> Metric:
        """Record a new value and recompute previous/current/trend.

        Raises:
            NotFoundError: no metric has ``metric_id``.
        """
        updated = await self._repo.update(
            metric_id, lambda m: apply_new_value(m, new_value)
        )
        if updated is None:
            raise NotFoundError("Metric", metric_id)
        logger.debug(
            "metric_value_updated",
            metric_id=metric_id,
            value=new_value,
            trend=updated.trend,
        )
        return updated

    async def delete(self, metric_id: str) -> bool:
        deleted = await self._repo.delete(metric_id)
        if deleted:
            logger.info("metric_deleted", metric_id=metric_id)
        return deleted

    async def get_history(
        self,
        metric_id: str,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
    ) -> list[MetricValue]:
        return await self._repo.get_history(metric_id, from_date, to_date)

    async def check_thresholds(self, metric_id: str) -> ThresholdStatus:
        metric = await self._repo.get(metric_id)
        if metric is None or metric.thresholds is None:
            return ThresholdStatus()
        return ThresholdStatus(
            has_crossed_warning=metric.current_value >= metric.thresholds.warning,
            has_crossed_critical=metric.current_value >= metric.thresholds.critical,
        )
