"""Request-scoped middleware: request id correlation and the last-resort 500 body."""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from foodorder.domain.exceptions import CommonErrorCode

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag every request with an ``X-Request-ID``.

    A caller-supplied id is reused as is. The id lands on ``request.state``
    where routers pick it up for the services, and it is bound into the
    structlog context for the duration of the request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn anything that escapes the exception handlers into a 500 ErrorResponse."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(exc),
            )
            error = CommonErrorCode.INTERNAL_SERVER_ERROR
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error_code": error.code,
                    "message": error.message,
                    "details": {},
                    "request_id": getattr(request.state, "request_id", None),
                },
            )


def setup_middleware(app: FastAPI) -> None:
    # Starlette runs the last added middleware first, so the request id is
    # bound before the error handler can log.
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIdMiddleware)
