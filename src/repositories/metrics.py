"""Metric repository: persistence and filtered retrieval of metrics."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime

from src.models.common import ensure_utc
from src.models.metric import Metric, MetricFilter, MetricValue
from src.repositories.base import EntityStore, InMemoryEntityStore


class MetricRepository(ABC):
    """Metric persistence contract."""

    @abstractmethod
    async def get(self, metric_id: str) -> Metric | None: ...

    @abstractmethod
    async def get_by_ids(self, metric_ids: list[str]) -> list[Metric]: ...

    @abstractmethod
    async def list_all(self, metric_filter: MetricFilter | None = None) -> list[Metric]: ...

    @abstractmethod
    async def save(self, metric: Metric) -> Metric: ...

    @abstractmethod
    async def delete(self, metric_id: str) -> bool: ...

    @abstractmethod
    async def update(self, metric_id: str, mutate: Callable[[Metric], Metric]) -> Metric | None: ...

    @abstractmethod
    async def get_history(
        self,
        metric_id: str,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
    ) -> list[MetricValue]: ...

    @abstractmethod
    async def count(self) -> int: ...


def matches_filter(metric: Metric, metric_filter: MetricFilter) -> bool:
    """Return True when ``metric`` passes every populated filter criterion."""
    if metric_filter.types and metric.type not in metric_filter.types:
        return False
    if metric_filter.periods and metric.period not in metric_filter.periods:
        return False

    if metric_filter.search:
        needle = metric_filter.search.lower()
        haystacks = (metric.key, metric.metadata.name, metric.metadata.description)
        if not any(needle in h.lower() for h in haystacks):
            return False

    last_updated = metric.metadata.last_updated
    if last_updated is not None:
        if metric_filter.from_date and last_updated < metric_filter.from_date:
            return False
        if metric_filter.to_date and last_updated > metric_filter.to_date:
            return False
    return True


class InMemoryMetricRepository(MetricRepository):
    def __init__(self, store: EntityStore[Metric] | None = None) -> None:
        self._store = store if store is not None else InMemoryEntityStore[Metric]()

    async def get(self, metric_id: str) -> Metric | None:
        return await self._store.get(metric_id)

    async def get_by_ids(self, metric_ids: list[str]) -> list[Metric]:
        found: list[Metric] = []
        for metric_id in metric_ids:
            metric = await self._store.get(metric_id)
            if metric is not None:
                found.append(metric)
        return found

    async def list_all(self, metric_filter: MetricFilter | None = None) -> list[Metric]:
        metrics = await self._store.list_all()
        if metric_filter is None:
            return metrics
        return [m for m in metrics if matches_filter(m, metric_filter)]

    async def save(self, metric: Metric) -> Metric:
        return await self._store.save(metric)

    async def delete(self, metric_id: str) -> bool:
        return await self._store.delete(metric_id)

    async def update(self, metric_id: str, mutate: Callable[[Metric], Metric]) -> Metric | None:
        return await self._store.update(metric_id, mutate)

    async def get_history(
        self,
        metric_id: str,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
    ) -> list[MetricValue]:
        metric = await self._store.get(metric_id)
        if metric is None:
            return []
        from_date = ensure_utc(from_date) if from_date else None
        to_date = ensure_utc(to_date) if to_date else None
        return [
            entry
            for entry in metric.history
            if not (from_date and entry.timestamp < from_date)
            and not (to_date and entry.timestamp > to_date)
        ]

    async def count(self) -> int:
        return await self._store.count()
