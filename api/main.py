"""
api/main.py -- FastAPI application entry point for AuthFlow.

Exposes the account operations in auth/service.py over HTTP.

Run with:  uvicorn asgi:app --reload

Middleware stack:
  1. CORSMiddleware -- adds CORS headers for allowed browser origins
  2. log_requests   -- one access-log line per request with latency

Lifespan builds the shared collaborators once (UserStore, TokenSigner,
AuthService) and tears them down on shutdown. Route handlers reach them
through app.state; nothing reads configuration per request.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse, HealthResponse
from api.routes.v1.auth import router as auth_router
from auth.errors import AuthError, InfrastructureError
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenSigner
from core.config import get_settings

__version__ = "0.1.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("authflow.api")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


def build_auth_service(store: UserStore) -> AuthService:
    """Wire an AuthService from Settings around the given store."""
    signer = TokenSigner(
        _settings.secret_key,
        session_ttl=timedelta(seconds=_settings.session_token_expire_seconds),
        reset_ttl=timedelta(seconds=_settings.reset_token_expire_seconds),
    )
    return AuthService(
        store,
        signer,
        bcrypt_rounds=_settings.bcrypt_rounds,
        expose_reset_token=_settings.expose_reset_token,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the user store and auth service on startup; dispose on shutdown."""
    logger.info("AuthFlow API starting up")
    app.state.user_store = UserStore(_settings.database_url)
    app.state.auth_service = build_auth_service(app.state.user_store)
    app.state.signer = app.state.auth_service.signer
    if not _settings.expose_reset_token:
        logger.info("Reset tokens will not be returned in forgot-password responses")

    yield

    app.state.user_store.close()
    logger.info("AuthFlow API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="AuthFlow API",
    description="Registration, login, and token-based password reset.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost", "http://localhost:3000", "http://127.0.0.1"],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix=_settings.api_prefix, tags=["Auth"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every error leaves the API as {"success": false, "message": ...} so clients
# can parse failures without choosing a schema by status code.
# ---------------------------------------------------------------------------


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Render a flow-controller failure.

    InfrastructureError was already logged with its traceback where it was
    raised. Its cause stays out of the response body.
    """
    if isinstance(exc, InfrastructureError):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.debug("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=exc.message).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 when the request body is not JSON of the expected shape."""
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(message="Request validation failed.").model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return the error envelope for FastAPI/Starlette HTTP exceptions.

    auth/dependencies.py raises with detail already shaped as the envelope;
    anything else gets its detail stringified into "message".
    """
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = ErrorResponse(message=str(exc.detail)).model_dump()
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected server errors. The traceback goes to the log only."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(message="An unexpected error occurred.").model_dump(),
    )


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version."""
    return HealthResponse(version=__version__)
