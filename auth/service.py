"""
auth/service.py -- The authentication flow controller.

AuthService orchestrates validators, the user store, the password hasher and
the token signer into the five account operations:

  register         -- create an account
  login            -- exchange email + password for a session token
  forgot_password  -- mint a short-lived reset token
  reset_password   -- set a new password (caller holds a verified reset token)
  get_user         -- display name for the holder of a session token

Each operation returns a plain dict body on success and raises an AuthError
subclass on failure. The status code for success is fixed per route, and the
API layer renders every AuthError with a single exception handler.

Ordering:
  Input checks run in a fixed order and the first failure wins. No errors are
  aggregated. Directory lookups only happen once every shape check passed.

Concurrency:
  Store calls and bcrypt are blocking, so they run through
  run_in_threadpool. Every public method is a coroutine and never holds the
  event loop while waiting on the database or the hasher.

  register() does a check-then-insert without a transaction. The store's
  UNIQUE constraint turns the losing insert of a race into the same
  "User already exists" conflict.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi.concurrency import run_in_threadpool

from auth.errors import AuthConflictError, AuthError, InfrastructureError, NotFoundError, ValidationError
from auth.models import User
from auth.passwords import DEFAULT_ROUNDS, dummy_hash, hash_password, verify_password
from auth.store import UserStore
from auth.tokens import RESET_CLAIM, SESSION_CLAIM, TokenSigner
from auth.validators import valid_email, valid_password, valid_username

logger = logging.getLogger("authflow.auth")

# User-facing messages. Kept in one place so routes and tests agree.
MSG_ALL_FIELDS_REQUIRED = "All fields are required"
MSG_BAD_NAME = "Name must only contain alphabets and spaces"
MSG_BAD_EMAIL = "Invalid email format"
MSG_SHORT_PASSWORD = "Password must be at least 6 characters"
MSG_USER_EXISTS = "User already exists"
MSG_REGISTERED = "Registered Successfully"
MSG_LOGIN_FIELDS_REQUIRED = "Email and password are required"
MSG_USER_NOT_FOUND = "User not found"
MSG_BAD_PASSWORD = "Invalid Password"
MSG_LOGGED_IN = "Successfully Logged In"
MSG_EMAIL_NOT_FOUND = "Email not found"
MSG_SAME_PASSWORD = "New password must be different from the old one"
MSG_PASSWORD_UPDATED = "Password updated successfully"

MSG_REGISTER_FAILED = "Error during Register"
MSG_LOGIN_FAILED = "Error during Login"
MSG_FORGOT_FAILED = "Server error"
MSG_RESET_FAILED = "Error updating password"
MSG_GET_USER_FAILED = "Error Fetching the User Details"

# Called with (user, token) after a reset token is minted.
ResetTokenSink = Callable[[User, str], None]


def _log_reset_token(user: User, token: str) -> None:
    """Default sink: record that a reset token was issued, never the token itself."""
    logger.info("Password reset token issued user_id=%s", user.id)


class AuthService:
    """Account operations over an injected store and token signer.

    Usage:
        service = AuthService(store, TokenSigner(settings.secret_key))
        body = await service.register("Jane Doe", "jane@x.com", "secret1")
    """

    def __init__(
        self,
        store: UserStore,
        signer: TokenSigner,
        *,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
        expose_reset_token: bool = True,
        reset_token_sink: ResetTokenSink = _log_reset_token,
    ) -> None:
        self.store = store
        self.signer = signer
        self.bcrypt_rounds = bcrypt_rounds
        self.expose_reset_token = expose_reset_token
        self.reset_token_sink = reset_token_sink
        # Built up front so the first unknown-email login is not slower than later ones.
        self._dummy_hash = dummy_hash(bcrypt_rounds)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def register(self, name: str | None, email: str | None, password: str | None) -> dict[str, Any]:
        if not name or not email or not password:
            raise ValidationError(MSG_ALL_FIELDS_REQUIRED)
        if not valid_username(name):
            raise ValidationError(MSG_BAD_NAME)
        if not valid_email(email):
            raise ValidationError(MSG_BAD_EMAIL)
        if not valid_password(password):
            raise ValidationError(MSG_SHORT_PASSWORD)

        async with _infrastructure_guard(MSG_REGISTER_FAILED):
            if await run_in_threadpool(self.store.find_by_email, email) is not None:
                raise AuthConflictError(MSG_USER_EXISTS)
            hashed = await run_in_threadpool(hash_password, password, self.bcrypt_rounds)
            await run_in_threadpool(self.store.insert, User(name=name, email=email, hashed_password=hashed))

        return {"success": True, "message": MSG_REGISTERED}

    async def login(self, email: str | None, password: str | None) -> dict[str, Any]:
        if not email or not password:
            raise ValidationError(MSG_LOGIN_FIELDS_REQUIRED)
        if not valid_email(email):
            raise ValidationError(MSG_BAD_EMAIL)

        async with _infrastructure_guard(MSG_LOGIN_FAILED):
            user = await run_in_threadpool(self.store.find_by_email, email)
            if user is None:
                # Equalize timing with the wrong-password branch.
                await run_in_threadpool(verify_password, password, self._dummy_hash)
                raise NotFoundError(MSG_USER_NOT_FOUND)
            if not await run_in_threadpool(verify_password, password, user.hashed_password):
                raise ValidationError(MSG_BAD_PASSWORD)
            token = self.signer.issue_session_token(user.id)

        logger.info("Login succeeded user_id=%s", user.id)
        return {"token": token, "message": MSG_LOGGED_IN, "success": True}

    async def forgot_password(self, email: str | None) -> dict[str, Any]:
        # A missing email is not reported separately: it fails the shape check.
        if not valid_email(email):
            raise ValidationError(MSG_BAD_EMAIL)

        async with _infrastructure_guard(MSG_FORGOT_FAILED):
            user = await run_in_threadpool(self.store.find_by_email, email)
            if user is None:
                raise NotFoundError(MSG_EMAIL_NOT_FOUND)
            token = self.signer.issue_reset_token(user.id)
            self.reset_token_sink(user, token)

        body: dict[str, Any] = {"success": True}
        if self.expose_reset_token:
            body["token"] = token
        return body

    async def reset_password(self, claims: dict[str, Any], password: str | None) -> dict[str, Any]:
        """Replace the password of the user named by a verified reset token's claims."""
        if not valid_password(password):
            raise ValidationError(MSG_SHORT_PASSWORD)

        user_id = claims.get(RESET_CLAIM)
        async with _infrastructure_guard(MSG_RESET_FAILED):
            user = await self._find_by_id(user_id)
            if user is None:
                raise NotFoundError(MSG_USER_NOT_FOUND)
            if await run_in_threadpool(verify_password, password, user.hashed_password):
                raise AuthConflictError(MSG_SAME_PASSWORD)
            hashed = await run_in_threadpool(hash_password, password, self.bcrypt_rounds)
            if not await run_in_threadpool(self.store.update_by_id, user.id, hashed_password=hashed):
                # Row removed between lookup and update.
                raise NotFoundError(MSG_USER_NOT_FOUND)

        logger.info("Password updated user_id=%s", user.id)
        return {"success": True, "message": MSG_PASSWORD_UPDATED}

    async def get_user(self, claims: dict[str, Any]) -> dict[str, Any]:
        """Return the display name of the session token's holder. Nothing else is exposed."""
        user_id = claims.get(SESSION_CLAIM)
        async with _infrastructure_guard(MSG_GET_USER_FAILED):
            user = await self._find_by_id(user_id)
        if user is None:
            raise NotFoundError(MSG_USER_NOT_FOUND, status_code=404)
        return {"username": user.name}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _find_by_id(self, user_id: Any) -> User | None:
        # Claims come from a verified token, but a token of the wrong kind
        # simply lacks the claim. Treat that as an unknown user.
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return None
        return await run_in_threadpool(self.store.find_by_id, user_id)


@asynccontextmanager
async def _infrastructure_guard(message: str) -> AsyncIterator[None]:
    """Map unexpected failures inside the block to InfrastructureError.

    AuthErrors raised inside the block (not found, conflicts) pass through
    untouched. Anything else, including the store's own InfrastructureError,
    is logged with its traceback and re-raised as InfrastructureError carrying
    the operation's generic message.
    """
    try:
        yield
    except InfrastructureError as exc:
        logger.exception(message)
        raise InfrastructureError(message, cause=exc.cause or exc) from exc
    except AuthError:
        raise
    except Exception as exc:
        logger.exception(message)
        raise InfrastructureError(message, cause=exc) from exc
