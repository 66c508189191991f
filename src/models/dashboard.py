"""Dashboard and widget domain models."""

from typing import Any

from pydantic import Field

from src.models.common import (
    PulseboardBase,
    UTCTimestamp,
    WidgetSize,
    WidgetType,
    new_id,
    utc_now,
)


class WidgetPosition(PulseboardBase):
    """Placement on the dashboard grid, in grid units."""

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(ge=1)
    height: int = Field(ge=1)


class Widget(PulseboardBase):
    """A single visualisation on a dashboard.

    Owned by its dashboard; has no lifecycle of its own.
    """

    id: str = Field(default_factory=new_id)
    title: str
    type: WidgetType
    size: WidgetSize
    metric_ids: list[str] = Field(default_factory=list)
    position: WidgetPosition
    config: dict[str, Any] = Field(default_factory=dict)


class Dashboard(PulseboardBase):
    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1)
    description: str = ""
    owner: str
    widgets: list[Widget] = Field(default_factory=list)
    is_default: bool | None = None
    tags: list[str] | None = None
    created_at: UTCTimestamp = Field(default_factory=utc_now)
    updated_at: UTCTimestamp = Field(default_factory=utc_now)


class DashboardFilter(PulseboardBase):
    """Typed filter for dashboard listings.

    ``tags`` matches a dashboard carrying any of the given tags. A dashboard
    without an ``is_default`` flag counts as not default.
    """

    owner: str | None = None
    search: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_default: bool | None = None


# Fields a dashboard update may overwrite.
DASHBOARD_UPDATABLE_FIELDS = frozenset({"name", "description", "tags", "is_default"})

# Fields a widget update may overwrite (the id is fixed).
WIDGET_UPDATABLE_FIELDS = frozenset(
    {"title", "type", "size", "metric_ids", "position", "config"}
)


def create_dashboard(name: str, description: str, owner: str) -> Dashboard:
    """Build a new, empty dashboard."""
    now = utc_now()
    return Dashboard(
        name=name,
        description=description,
        owner=owner,
        widgets=[],
        created_at=now,
        updated_at=now,
    )


def create_widget(
    title: str,
    type: WidgetType,
    size: WidgetSize,
    metric_ids: list[str],
    position: WidgetPosition,
) -> Widget:
    return Widget(
        title=title,
        type=type,
        size=size,
        metric_ids=list(metric_ids),
        position=position,
        config={},
    )
