"""Food ordering API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from foodorder.api.carts import router as carts_router
from foodorder.api.errors import status_for
from foodorder.api.health import router as health_router
from foodorder.api.menus import router as menus_router
from foodorder.api.middleware import setup_middleware
from foodorder.api.orders import router as orders_router
from foodorder.domain.exceptions import CommonErrorCode, DomainError
from foodorder.infrastructure.config import settings
from foodorder.infrastructure.logging import configure_logging
from foodorder.infrastructure.shop_client import close_shop_client
from foodorder.infrastructure.user_client import close_user_client

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    configure_logging(settings.log_level)
    logger.info(
        "Starting food ordering API",
        version=settings.api_version,
        debug=settings.debug,
        remote_collaborators=settings.use_remote_clients,
    )

    yield

    await close_shop_client()
    await close_user_client()
    logger.info("Shutting down food ordering API")


app = FastAPI(
    title="Food Ordering API",
    description="Menus, carts and orders for a food ordering platform",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(menus_router)
app.include_router(carts_router)
app.include_router(orders_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", CommonErrorCode.INVALID_REQUEST.code)
        message = detail.get("message", str(detail))
        details = detail.get("details", {})
    else:
        error_code = CommonErrorCode.INVALID_REQUEST.code
        message = str(detail)
        details = {}

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
            "request_id": request_id,
        },
    )


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Handle domain errors that escaped a service."""
    request_id = getattr(request.state, "request_id", None)

    logger.warning(
        "Domain error reached the API layer",
        path=request.url.path,
        error_code=exc.code,
        error=exc.message,
    )

    return JSONResponse(
        status_code=status_for(exc.code),
        content={
            "error_code": exc.code,
            "message": exc.message,
            "details": exc.details,
            "request_id": request_id,
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return JSONResponse(
        status_code=500,
        content={
            "error_code": CommonErrorCode.INTERNAL_SERVER_ERROR.code,
            "message": CommonErrorCode.INTERNAL_SERVER_ERROR.message,
            "details": {},
            "request_id": request_id,
        },
    )
