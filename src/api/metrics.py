"""FastAPI metric endpoints.

GET    /metrics                      — list metrics (search/types/periods/dates)
POST   /metrics                      — create metric
GET    /metrics/{metric_id}          — get metric
PUT    /metrics/{metric_id}          — record a new value
DELETE /metrics/{metric_id}          — delete metric
GET    /metrics/{metric_id}/history  — value history within a date window
GET    /metrics/{metric_id}/thresholds — warning/critical crossing status

``types`` and ``periods`` are comma-separated lists.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import Field, FiniteFloat, ValidationError

from src.api.dependencies import get_metric_service, split_csv
from src.api.errors import as_request_validation_error
from src.models.common import MetricPeriod, MetricType, PulseboardBase
from src.models.metric import Metric, MetricFilter, MetricThreshold, MetricValue, ThresholdStatus
from src.services.errors import NotFoundError
from src.services.metric_service import MetricService

router = APIRouter(tags=["metrics"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------


class CreateMetricRequest(PulseboardBase):
    key: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: MetricType
    period: MetricPeriod
    initial_value: FiniteFloat
    description: str | None = None
    thresholds: MetricThreshold | None = None
    unit: str | None = None
    owner: str | None = None
    target_value: FiniteFloat | None = None


class UpdateMetricValueRequest(PulseboardBase):
    value: FiniteFloat


class MetricResponse(PulseboardBase):
    metric: Metric


class MetricListResponse(PulseboardBase):
    metrics: list[Metric]


class MetricHistoryResponse(PulseboardBase):
    history: list[MetricValue]


class SuccessResponse(PulseboardBase):
    success: bool = True


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/metrics", response_model=MetricListResponse)
async def list_metrics(
    search: str | None = Query(None),
    types: str | None = Query(None),
    periods: str | None = Query(None),
    from_date: datetime | None = Query(None, alias="fromDate"),
    to_date: datetime | None = Query(None, alias="toDate"),
    service: MetricService = Depends(get_metric_service),
) -> MetricListResponse:
    try:
        metric_filter = MetricFilter(
            search=search,
            types=split_csv(types),
            periods=split_csv(periods),
            from_date=from_date,
            to_date=to_date,
        )
    except ValidationError as exc:
        raise as_request_validation_error(exc) from exc

    metrics = await service.get_all(metric_filter)
    return MetricListResponse(metrics=metrics)


@router.post("/metrics", status_code=201, response_model=MetricResponse)
async def create_metric(
    body: CreateMetricRequest,
    service: MetricService = Depends(get_metric_service),
) -> MetricResponse:
    metric = await service.create(
        body.key,
        body.name,
        body.type,
        body.period,
        body.initial_value,
        body.description,
        body.thresholds,
        unit=body.unit,
        owner=body.owner,
        target_value=body.target_value,
    )
    return MetricResponse(metric=metric)


@router.get("/metrics/{metric_id}", response_model=MetricResponse)
async def get_metric(
    metric_id: str,
    service: MetricService = Depends(get_metric_service),
) -> MetricResponse:
    metric = await service.get_by_id(metric_id)
    if metric is None:
        raise NotFoundError("Metric", metric_id)
    return MetricResponse(metric=metric)


@router.put("/metrics/{metric_id}", response_model=MetricResponse)
async def update_metric_value(
    metric_id: str,
    body: UpdateMetricValueRequest,
    service: MetricService = Depends(get_metric_service),
) -> MetricResponse:
    metric = await service.update_value(metric_id, body.value)
    return MetricResponse(metric=metric)


@router.delete("/metrics/{metric_id}", response_model=SuccessResponse)
async def delete_metric(
    metric_id: str,
    service: MetricService = Depends(get_metric_service),
) -> SuccessResponse:
    if not await service.delete(metric_id):
        raise NotFoundError("Metric", metric_id)
    return SuccessResponse()


@router.get("/metrics/{metric_id}/history", response_model=MetricHistoryResponse)
async def get_metric_history(
    metric_id: str,
    from_date: datetime | None = Query(None, alias="fromDate"),
    to_date: datetime | None = Query(None, alias="toDate"),
    service: MetricService = Depends(get_metric_service),
) -> MetricHistoryResponse:
    if await service.get_by_id(metric_id) is None:
        raise NotFoundError("Metric", metric_id)
    history = await service.get_history(metric_id, from_date, to_date)
    return MetricHistoryResponse(history=history)


@router.get("/metrics/{metric_id}/thresholds", response_model=ThresholdStatus)
async def get_threshold_status(
    metric_id: str,
    service: MetricService = Depends(get_metric_service),
) -> ThresholdStatus:
    if await service.get_by_id(metric_id) is None:
        raise NotFoundError("Metric", metric_id)
    return await service.check_thresholds(metric_id)
