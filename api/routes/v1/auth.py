"""
api/routes/v1/auth.py -- Account REST endpoints.

Routes (mounted under Settings.api_prefix, default /api/v1/auth):
  POST /register         -- create an account; 201
  POST /login            -- email + password -> session token; 200
  POST /forgot-password  -- email -> reset token; 200
  POST /reset-password   -- new password; requires a reset bearer token
  GET  /getuser          -- display name; requires a session bearer token

Route handlers are thin: they unpack the body, call the matching AuthService
operation, and return its dict. Failures are AuthError subclasses rendered by
the handler in api/main.py, so no handler builds an error response itself.

Bodies are optional. A request with no body is treated as an empty object so
AuthService reports the missing fields with its own 400 messages; only JSON
of the wrong shape is rejected with 422.

Security:
  Cache-Control: no-store on every response that carries a token.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, Response

from api.models import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    UserNameResponse,
)
from auth.dependencies import get_token_claims
from auth.service import AuthService

# Auth policy:
# - POST /register:         public
# - POST /login:            public
# - POST /forgot-password:  public
# - POST /reset-password:   requires bearer token (get_token_claims), reads the reset claim
# - GET  /getuser:          requires bearer token (get_token_claims), reads the session claim
router = APIRouter()


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(
    body: RegisterRequest | None = None,
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Create an account from name, email and password."""
    body = body or RegisterRequest()
    return await service.register(body.name, body.email, body.password)


@router.post("/login", response_model=LoginResponse)
async def login(
    response: Response,
    body: LoginRequest | None = None,
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Verify email + password and return a one-day session token."""
    body = body or LoginRequest()
    result = await service.login(body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return result


@router.post("/forgot-password", response_model=ForgotPasswordResponse, response_model_exclude_none=True)
async def forgot_password(
    response: Response,
    body: ForgotPasswordRequest | None = None,
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Mint a one-hour reset token for a registered email."""
    body = body or ForgotPasswordRequest()
    result = await service.forgot_password(body.email)
    response.headers["Cache-Control"] = "no-store"
    return result


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest | None = None,
    claims: dict = Depends(get_token_claims),
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Set a new password for the user named by the reset token."""
    body = body or ResetPasswordRequest()
    return await service.reset_password(claims, body.password)


@router.get("/getuser", response_model=UserNameResponse)
async def get_user(
    claims: dict = Depends(get_token_claims),
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Return the display name of the session token's holder."""
    return await service.get_user(claims)
