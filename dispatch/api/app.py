"""
FastAPI application factory.

* Registers the dispatch routes.
* Maps domain / service errors onto a single ``ErrorResponse`` shape.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from dispatch.api.middleware import limiter
from dispatch.api.routes import dispatch
from dispatch.api.schemas import ErrorResponse
from dispatch.config import settings
from dispatch.domain.distance import InvalidCoordinate
from dispatch.domain.exceptions import (
    DuplicateIdsInRequest,
    DuplicateOrderError,
    DuplicateVehicleError,
    NoOrdersError,
    NoVehiclesError,
    OptimizationTimeout,
)
from dispatch.infrastructure.database import engine

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

_REASONS = {
    400: "Bad Request",
    409: "Conflict",
    500: "Internal Server Error",
    504: "Gateway Timeout",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release pooled DB connections on shutdown."""
    yield
    await engine.dispose()


def _error(
    request: Request,
    status: int,
    message: str,
    *,
    validation_errors: Optional[dict[str, str]] = None,
    details: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        status=status,
        error=_REASONS[status],
        message=message,
        path=request.url.path,
        validation_errors=validation_errors,
        details=details,
    )
    return JSONResponse(
        status_code=status, content=body.model_dump(mode="json", exclude_none=True)
    )


def _field_path(loc: tuple) -> str:
    """``("body", "orders", 0, "latitude")`` -> ``"orders[0].latitude"``."""
    path = ""
    for part in loc:
        if part == "body" and not path:
            continue
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


async def _validation_handler(request: Request, exc: RequestValidationError):
    errors = {_field_path(tuple(e["loc"])): e["msg"] for e in exc.errors()}
    logger.warning("Validation failed: %d errors", len(errors))
    return _error(request, 400, "Validation failed", validation_errors=errors)


async def _bad_request_handler(request: Request, exc: Exception):
    logger.error("%s: %s", type(exc).__name__, exc)
    return _error(request, 400, str(exc))


async def _duplicate_order_handler(request: Request, exc: DuplicateOrderError):
    logger.error("DuplicateOrderError: %s", exc)
    return _error(
        request, 409, str(exc), details={"duplicate_order_id": exc.order_id}
    )


async def _duplicate_vehicle_handler(request: Request, exc: DuplicateVehicleError):
    logger.error("DuplicateVehicleError: %s", exc)
    return _error(
        request, 409, str(exc), details={"duplicate_vehicle_id": exc.vehicle_id}
    )


async def _timeout_handler(request: Request, exc: OptimizationTimeout):
    return _error(
        request, 504, str(exc), details={"timeout_seconds": exc.timeout_seconds}
    )


async def _unhandled_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception occurred")
    return _error(
        request,
        500,
        "An unexpected error occurred. Please try again later.",
        details={"exception_type": type(exc).__name__},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Fleet Dispatch API",
        description=(
            "Stores delivery orders and vehicles, and allocates orders to "
            "capacity-constrained vehicles by priority and distance."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Error mapping
    app.add_exception_handler(RequestValidationError, _validation_handler)
    for exc_type in (
        NoOrdersError,
        NoVehiclesError,
        DuplicateIdsInRequest,
        InvalidCoordinate,
    ):
        app.add_exception_handler(exc_type, _bad_request_handler)
    app.add_exception_handler(DuplicateOrderError, _duplicate_order_handler)
    app.add_exception_handler(DuplicateVehicleError, _duplicate_vehicle_handler)
    app.add_exception_handler(OptimizationTimeout, _timeout_handler)
    app.add_exception_handler(Exception, _unhandled_handler)

    # Routers
    app.include_router(dispatch.router, prefix=settings.api_prefix)

    return app
