"""
Middleware and Error Handler Setup for the FastAPI Application

This module registers the cross-cutting request handling of the service:
CORS for the map frontend, per-request access logging, and the conversion of
cold-cache failures into 503 responses.

Main Components:
----------------
1. **RequestLoggingMiddleware (Starlette BaseHTTPMiddleware subclass)**:
   Logs method, path, status code and duration of every request.

2. **register_middleware (function)**:
   Attaches `CORSMiddleware` (origin from `FRONTEND`) and `RequestLoggingMiddleware`.

3. **register_exception_handlers (function)**:
   Maps `DatasetUnavailableError` to a 503 `{"error": ...}` JSON body.

Typical Use:
------------
Call both register functions with the FastAPI app instance during app
initialization, before the app starts serving requests.
"""
import logging
import time
from typing import Callable, Awaitable
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from seoulfit.core.config import FRONTEND
from seoulfit.data.cache_guard import DatasetUnavailableError

logger = logging.getLogger(__name__)

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware logging one line per handled request.
    """
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method, request.url.path, response.status_code, elapsed_ms
        )
        return response

async def dataset_unavailable_handler(request: Request, exc: DatasetUnavailableError) -> JSONResponse:
    logger.warning(f"Dataset '{exc.key}' unavailable for {request.url.path}.")
    return JSONResponse(status_code=503, content={"error": exc.message})

def register_middleware(app: FastAPI) -> None:
    """
    Register middleware on the FastAPI application instance.

    Args:
        app (FastAPI): The FastAPI application instance to register middleware on.
    """
    app.add_middleware(CORSMiddleware,
        allow_origins=[FRONTEND],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DatasetUnavailableError, dataset_unavailable_handler)
