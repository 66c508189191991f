"""Shared types, enums, and base models used across Pulseboard domain models."""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from uuid_extensions import uuid7


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def new_uuid7() -> UUID:
    """Generate a new time-sortable UUID v7."""
    return uuid7()


def new_id() -> str:
    """Opaque entity identifier (UUID v7 text)."""
    return str(new_uuid7())


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare against stored timestamps."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# --- Reusable annotated types ---

UTCTimestamp = Annotated[
    datetime, Field(description="UTC timezone-aware timestamp.")
]


# --- Shared enums ---


class MetricType(StrEnum):
    """Unit family of a metric value."""

    COUNT = "count"
    PERCENTAGE = "percentage"
    DURATION = "duration"
    MONETARY = "monetary"


class MetricPeriod(StrEnum):
    """Aggregation period a metric is reported over."""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class TrendDirection(StrEnum):
    """Direction of the last value change."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class WidgetType(StrEnum):
    """Dashboard widget renderers."""

    COUNTER = "counter"
    GAUGE = "gauge"
    LINE_CHART = "lineChart"
    BAR_CHART = "barChart"
    TABLE = "table"
    STATUS_CARD = "statusCard"


class WidgetSize(StrEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


# --- Base models ---


class PulseboardBase(BaseModel):
    """Base model for dashboard-side entities.

    Python attributes are snake_case; the JSON form is camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


class GitHubPayload(BaseModel):
    """Base model for GitHub-shaped payloads (snake_case on the wire)."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )
