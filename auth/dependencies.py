"""
auth/dependencies.py -- FastAPI Depends() helper for bearer-token auth.

get_token_claims() is the middleware collaborator in front of the protected
routes. It reads "Authorization: Bearer <token>", verifies the token with the
app's TokenSigner, stores the decoded claims on request.state.claims, and
returns them. Missing or invalid tokens fail the request with 401 before any
flow-controller code runs.

It does not check which kind of token it was given. The reset and profile
operations each look for their own claim and treat its absence as an unknown
user.

Layer rule: may import fastapi (this module is part of the dependency
injection system); no imports from api/.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, Request

from auth.errors import InvalidToken
from auth.tokens import TokenSigner

logger = logging.getLogger("authflow.auth")

_UNAUTHORIZED = {"success": False, "message": "Unauthorized"}


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_token_claims(request: Request) -> dict[str, Any]:
    """Require a valid bearer token. Raises HTTP 401 otherwise.

    Use as a FastAPI dependency:
        @router.get("/getuser")
        async def route(claims: dict = Depends(get_token_claims)): ...
    """
    token = _bearer_token(request)
    if token is None:
        raise HTTPException(
            status_code=401,
            detail=_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    signer: TokenSigner = request.app.state.signer
    try:
        claims = signer.verify(token)
    except InvalidToken as exc:
        logger.info("Rejected bearer token on %s: %s", request.url.path, exc.message)
        raise HTTPException(
            status_code=401,
            detail=_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    request.state.claims = claims
    return claims
