"""FastAPI dashboard endpoints.

GET    /dashboards                                  — list dashboards (owner/search/tags/isDefault)
POST   /dashboards                                  — create dashboard
GET    /dashboards/{dashboard_id}                   — get dashboard
PUT    /dashboards/{dashboard_id}                   — update name/description/tags/isDefault
DELETE /dashboards/{dashboard_id}                   — delete dashboard
POST   /dashboards/{dashboard_id}/widgets           — add widget
PUT    /dashboards/{dashboard_id}/widgets/{widget_id} — update widget
DELETE /dashboards/{dashboard_id}/widgets/{widget_id} — remove widget
PUT    /dashboards/{dashboard_id}/default           — make it a user's default
GET    /users/{user_id}/default-dashboard           — a user's default dashboard
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ConfigDict, Field, ValidationError

from src.api.dependencies import get_dashboard_service, split_csv
from src.api.errors import as_request_validation_error
from src.models.common import PulseboardBase, WidgetSize, WidgetType
from src.models.dashboard import Dashboard, DashboardFilter, WidgetPosition
from src.services.dashboard_service import DashboardService
from src.services.errors import NotFoundError

router = APIRouter(tags=["dashboards"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------


class _StrictRequest(PulseboardBase):
    model_config = ConfigDict(extra="forbid")


class CreateDashboardRequest(_StrictRequest):
    name: str = Field(..., min_length=1)
    description: str = ""
    owner: str = Field(..., min_length=1)
    tags: list[str] | None = None
    is_default: bool | None = None


class UpdateDashboardRequest(_StrictRequest):
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    tags: list[str] | None = None
    is_default: bool | None = None


class CreateWidgetRequest(_StrictRequest):
    title: str = Field(..., min_length=1)
    type: WidgetType
    size: WidgetSize
    metric_ids: list[str] = Field(default_factory=list)
    position: WidgetPosition


class UpdateWidgetRequest(_StrictRequest):
    title: str | None = Field(None, min_length=1)
    type: WidgetType | None = None
    size: WidgetSize | None = None
    metric_ids: list[str] | None = None
    position: WidgetPosition | None = None
    config: dict[str, Any] | None = None


class SetDefaultRequest(_StrictRequest):
    user_id: str = Field(..., min_length=1)


class DashboardResponse(PulseboardBase):
    dashboard: Dashboard


class DashboardListResponse(PulseboardBase):
    dashboards: list[Dashboard]


class SuccessResponse(PulseboardBase):
    success: bool = True


def _set_fields(body: PulseboardBase) -> dict[str, Any]:
    """Fields the client actually sent, minus explicit nulls."""
    return {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}


# ---------------------------------------------------------------------------
# Dashboards
# ---------------------------------------------------------------------------


@router.get("/dashboards", response_model=DashboardListResponse)
async def list_dashboards(
    owner: str | None = Query(None),
    search: str | None = Query(None),
    tags: str | None = Query(None),
    is_default: bool | None = Query(None, alias="isDefault"),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardListResponse:
    dashboard_filter = DashboardFilter(
        owner=owner or None,
        search=search or None,
        tags=split_csv(tags),
        is_default=is_default,
    )
    dashboards = await service.get_all(dashboard_filter)
    return DashboardListResponse(dashboards=dashboards)


@router.post("/dashboards", status_code=201, response_model=DashboardResponse)
async def create_dashboard(
    body: CreateDashboardRequest,
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    dashboard = await service.create(
        body.name,
        body.description,
        body.owner,
        tags=body.tags,
        is_default=body.is_default,
    )
    return DashboardResponse(dashboard=dashboard)


@router.get("/dashboards/{dashboard_id}", response_model=DashboardResponse)
async def get_dashboard(
    dashboard_id: str,
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    dashboard = await service.get_by_id(dashboard_id)
    if dashboard is None:
        raise NotFoundError("Dashboard", dashboard_id)
    return DashboardResponse(dashboard=dashboard)


@router.put("/dashboards/{dashboard_id}", response_model=DashboardResponse)
async def update_dashboard(
    dashboard_id: str,
    body: UpdateDashboardRequest,
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    try:
        dashboard = await service.update(dashboard_id, _set_fields(body))
    except ValidationError as exc:
        raise as_request_validation_error(exc) from exc
    return DashboardResponse(dashboard=dashboard)


@router.delete("/dashboards/{dashboard_id}", response_model=SuccessResponse)
async def delete_dashboard(
    dashboard_id: str,
    service: DashboardService = Depends(get_dashboard_service),
) -> SuccessResponse:
    if not await service.delete(dashboard_id):
        raise NotFoundError("Dashboard", dashboard_id)
    return SuccessResponse()


# ---------------------------------------------------------------------------
# Widgets
# ---------------------------------------------------------------------------


@router.post(
    "/dashboards/{dashboard_id}/widgets",
    status_code=201,
    response_model=DashboardResponse,
)
async def add_widget(
    dashboard_id: str,
    body: CreateWidgetRequest,
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    dashboard = await service.add_widget(
        dashboard_id,
        body.title,
        body.type,
        body.size,
        body.metric_ids,
        body.position,
    )
    return DashboardResponse(dashboard=dashboard)


@router.put(
    "/dashboards/{dashboard_id}/widgets/{widget_id}",
    response_model=DashboardResponse,
)
async def update_widget(
    dashboard_id: str,
    widget_id: str,
    body: UpdateWidgetRequest,
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    try:
        dashboard = await service.update_widget(dashboard_id, widget_id, _set_fields(body))
    except ValidationError as exc:
        raise as_request_validation_error(exc) from exc
    return DashboardResponse(dashboard=dashboard)


@router.delete(
    "/dashboards/{dashboard_id}/widgets/{widget_id}",
    response_model=DashboardResponse,
)
async def remove_widget(
    dashboard_id: str,
    widget_id: str,
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    dashboard = await service.remove_widget(dashboard_id, widget_id)
    return DashboardResponse(dashboard=dashboard)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


@router.put("/dashboards/{dashboard_id}/default", response_model=SuccessResponse)
async def set_default_dashboard(
    dashboard_id: str,
    body: SetDefaultRequest,
    service: DashboardService = Depends(get_dashboard_service),
) -> SuccessResponse:
    if not await service.set_as_default(dashboard_id, body.user_id):
        raise NotFoundError("Dashboard", dashboard_id)
    return SuccessResponse()


@router.get("/users/{user_id}/default-dashboard", response_model=DashboardResponse)
async def get_default_dashboard(
    user_id: str,
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    dashboard = await service.get_default(user_id)
    if dashboard is None:
        raise HTTPException(status_code=404, detail=f"No default dashboard for user {user_id}")
    return DashboardResponse(dashboard=dashboard)
