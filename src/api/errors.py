"""Exception handlers mapping domain and upstream failures to JSON errors.

Every error body has the form ``{"error": "<message>"}``; validation
failures add ``details`` with one ``{field, message, type}`` entry per
problem. Repositories and services never build responses themselves.
"""

from typing import Any

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException

from src.services.errors import ConfigurationError, NotFoundError

logger = structlog.get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."
GITHUB_ERROR_PREFIX = "GitHub API error"
CONFIGURATION_ERROR_PREFIX = "Configuration error"


def error_response(
    status_code: int,
    message: str,
    details: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"error": message}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def _upstream_message(response: httpx.Response) -> str:
    """GitHub puts a human-readable reason in ``message``."""
    try:
        payload = response.json()
    except ValueError:
        return "Unknown error"
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return "Unknown error"


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = []
    for error in exc.errors():
        loc = error.get("loc", ())
        # drop the "body"/"query"/"path" prefix FastAPI adds
        if len(loc) > 1 and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        details.append(
            {
                "field": ".".join(str(part) for part in loc),
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "value_error"),
            }
        )
    return error_response(400, "Validation error", details)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return error_response(404, exc.message)


async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    logger.error("configuration_error", path=request.url.path, setting=exc.setting)
    return error_response(500, f"{CONFIGURATION_ERROR_PREFIX}: {exc.message}")


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("http_exception", status=exc.status_code, detail=exc.detail)
    return error_response(exc.status_code, str(exc.detail))


async def upstream_status_handler(
    request: Request, exc: httpx.HTTPStatusError
) -> JSONResponse:
    message = _upstream_message(exc.response)
    logger.warning(
        "github_upstream_error",
        status=exc.response.status_code,
        path=request.url.path,
        message=message,
    )
    return error_response(exc.response.status_code, f"{GITHUB_ERROR_PREFIX}: {message}")


async def upstream_request_handler(
    request: Request, exc: httpx.RequestError
) -> JSONResponse:
    logger.error("github_unreachable", path=request.url.path, error=str(exc))
    return error_response(500, f"{GITHUB_ERROR_PREFIX}: {exc}")


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected_error", path=request.url.path, error=str(exc))
    return error_response(500, UNEXPECTED_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(httpx.HTTPStatusError, upstream_status_handler)
    app.add_exception_handler(httpx.RequestError, upstream_request_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)


def as_request_validation_error(exc: ValidationError) -> RequestValidationError:
    """Re-raise model validation done inside a route as a request error."""
    return RequestValidationError(exc.errors(include_url=False, include_context=False))
