# app/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routers import carts, orders, points, profiles, referrals
from app.api.routers.health import router as health_router
from app.domain.errors import (
    ConcurrentModification,
    CoreError,
    InsufficientPoints,
    InvalidCode,
    InvalidQuantity,
    NotFound,
    OutOfStock,
    StoreUnavailable,
)
from app.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS_CODES = (
    (NotFound, 404),
    (InvalidQuantity, 400),
    (InvalidCode, 400),
    (OutOfStock, 409),
    (InsufficientPoints, 409),
    (ConcurrentModification, 409),
    (StoreUnavailable, 503),
)


def status_for(exc: CoreError) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 400


async def core_error_handler(request: Request, exc: CoreError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "retryable": exc.retryable},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Marketplace Cart & Points Service",
        version="1.0.0",
    )

    app.add_exception_handler(CoreError, core_error_handler)

    # Include routers
    app.include_router(health_router)
    app.include_router(profiles.router)
    app.include_router(carts.router)
    app.include_router(points.router)
    app.include_router(referrals.router)
    app.include_router(orders.router)

    return app
