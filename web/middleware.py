"""
web/middleware.py
-----------------
Composable HTTP middleware for the intake app: request logging, per-client
rate limiting, gzip compression and CORS. Each piece can be switched on or
off independently from `install_middleware()`.
"""

import time
from typing import Sequence

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from security.rate_limiter import RateLimiter
from utils.logger import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ErrorFallbackMiddleware(BaseHTTPMiddleware):
    """
    Turns any exception that escaped the routes into a generic 500.
    Sits inside CORS, so error responses still carry CORS headers.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled exception on {request.url.path}: {e}", exc_info=True)
            return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects clients exceeding the limiter's budget with HTTP 429."""

    def __init__(self, app, limiter: RateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        if not self.limiter.allow(client):
            logger.warning(f"⚠️ Rate limit hit for client {client}")
            return JSONResponse(
                status_code=429,
                content={"message": "Too many requests, please try again later."},
            )
        return await call_next(request)


def install_middleware(
    app: FastAPI,
    *,
    request_logging: bool = True,
    rate_limiter: RateLimiter | None = None,
    gzip: bool = True,
    cors_origins: Sequence[str] = ("*",),
) -> None:
    """
    Attach the enabled middleware to ``app``.

    Starlette runs the most recently added middleware first, so the order
    below yields: logging -> CORS -> rate limit -> gzip -> error fallback -> routes.
    The error fallback is always installed.
    """
    app.add_middleware(ErrorFallbackMiddleware)
    if gzip:
        app.add_middleware(GZipMiddleware, minimum_size=500)
    if rate_limiter is not None:
        app.add_middleware(RateLimitMiddleware, limiter=rate_limiter)
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            allow_methods=["*"],
            allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
        )
    if request_logging:
        app.add_middleware(RequestLoggingMiddleware)
