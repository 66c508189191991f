"""Metric domain models.

A Metric carries its current value plus an append-only value history.
``trend`` and ``change_percentage`` are derived together by the metric
service whenever a new value is recorded; nothing else writes them.
"""

from datetime import datetime

from pydantic import Field, FiniteFloat, field_validator, model_validator

from src.models.common import (
    MetricPeriod,
    MetricType,
    PulseboardBase,
    TrendDirection,
    UTCTimestamp,
    ensure_utc,
    new_id,
    utc_now,
)


class MetricValue(PulseboardBase):
    """One recorded value. History order is chronological."""

    value: FiniteFloat
    timestamp: UTCTimestamp = Field(default_factory=utc_now)


class MetricThreshold(PulseboardBase):
    """Warning/critical levels; crossing is ``current_value >= level``.

    All numeric metric fields reject NaN and infinities.
    """

    warning: FiniteFloat
    critical: FiniteFloat


class MetricMetadata(PulseboardBase):
    name: str
    description: str = ""
    unit: str | None = None
    owner: str | None = None
    data_source: str | None = None
    last_updated: datetime | None = None


class Metric(PulseboardBase):
    """A measurable value tracked over time."""

    id: str = Field(default_factory=new_id)
    key: str = Field(..., min_length=1)
    type: MetricType
    period: MetricPeriod
    current_value: FiniteFloat
    previous_value: FiniteFloat | None = None
    trend: TrendDirection | None = None
    change_percentage: float | None = None
    history: list[MetricValue] = Field(default_factory=list)
    thresholds: MetricThreshold | None = None
    metadata: MetricMetadata
    target_value: FiniteFloat | None = None


class ThresholdStatus(PulseboardBase):
    has_crossed_warning: bool = False
    has_crossed_critical: bool = False


class MetricFilter(PulseboardBase):
    """Typed filter for metric listings.

    Empty ``types``/``periods`` mean "any". Date bounds are inclusive and
    compared against ``metadata.last_updated``.
    """

    types: list[MetricType] = Field(default_factory=list)
    periods: list[MetricPeriod] = Field(default_factory=list)
    search: str | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None

    @field_validator("from_date", "to_date")
    @classmethod
    def _normalize_tz(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @model_validator(mode="after")
    def _blank_search_is_none(self) -> "MetricFilter":
        if self.search is not None and not self.search.strip():
            self.search = None
        return self


def create_metric(
    key: str,
    name: str,
    type: MetricType,
    period: MetricPeriod,
    current_value: float,
) -> Metric:
    """Build a new Metric whose history is seeded with the initial value."""
    now = utc_now()
    return Metric(
        key=key,
        type=type,
        period=period,
        current_value=current_value,
        history=[MetricValue(value=current_value, timestamp=now)],
        metadata=MetricMetadata(name=name, description="", last_updated=now),
    )
