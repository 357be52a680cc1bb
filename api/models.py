"""
API request and response models for AuthFlow REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclass in auth/models.py, which
owns the internal domain representation.

Request fields are all optional: "field missing" is a domain outcome with its
own message ("All fields are required"), produced by AuthService rather than
by schema validation. Only wrong JSON types are rejected here (422).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    password: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    """Success envelope for register and reset-password."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str


class LoginResponse(BaseModel):
    """Response for a successful POST /login. token is a session JWT."""

    model_config = ConfigDict(frozen=True)

    token: str
    message: str
    success: bool


class ForgotPasswordResponse(BaseModel):
    """Response for POST /forgot-password.

    token is the reset JWT. It is omitted when EXPOSE_RESET_TOKEN is false.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    token: Optional[str] = None


class UserNameResponse(BaseModel):
    """Response for GET /getuser. Only the display name is ever returned."""

    model_config = ConfigDict(frozen=True)

    username: str


class ErrorResponse(BaseModel):
    """Uniform error envelope for every non-2xx response."""

    success: bool = False
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
