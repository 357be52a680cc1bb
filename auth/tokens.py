"""
auth/tokens.py -- JWT bearer tokens for sessions and password resets.

Security design decisions:
  JWT: python-jose with HS256. The signing secret is injected into
       TokenSigner at construction (api/main.py builds one from Settings in
       the lifespan); the signer never reads configuration on its own.

  Two token kinds share one signer and differ only in the claim that names
  the user and in lifetime:
    session token -- {"id": <user id>},     1 day by default
    reset token   -- {"userId": <user id>}, 1 hour by default
  A session token therefore cannot stand in for a reset token: the reset
  flow looks the user up by "userId" and finds nothing in a session token.

  There is no revocation list. A token is valid iff its signature checks
  out and "exp" has not passed.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from auth.errors import InvalidToken

logger = logging.getLogger("authflow.auth")

SESSION_CLAIM = "id"
RESET_CLAIM = "userId"

DEFAULT_SESSION_TTL = timedelta(days=1)
DEFAULT_RESET_TTL = timedelta(hours=1)


class TokenSigner:
    """Issue and verify HS256 JWTs with a fixed secret.

    Usage:
        signer = TokenSigner(settings.secret_key)
        token = signer.issue_session_token(user.id)
        claims = signer.verify(token)   # raises InvalidToken
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        session_ttl: timedelta = DEFAULT_SESSION_TTL,
        reset_ttl: timedelta = DEFAULT_RESET_TTL,
    ) -> None:
        if not secret_key:
            raise ValueError("TokenSigner requires a non-empty secret key.")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.session_ttl = session_ttl
        self.reset_ttl = reset_ttl

    def issue(self, claims: dict[str, Any], expires_in: timedelta) -> str:
        """Sign claims plus iat/exp. The caller's dict is not mutated."""
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + expires_in
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """Return the decoded claims or raise InvalidToken.

        Signature mismatch, malformed structure, and elapsed expiry all raise.
        """
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise InvalidToken("Token has expired") from exc
        except JWTError as exc:
            raise InvalidToken("Invalid token") from exc

    def issue_session_token(self, user_id: int) -> str:
        return self.issue({SESSION_CLAIM: user_id}, self.session_ttl)

    def issue_reset_token(self, user_id: int) -> str:
        return self.issue({RESET_CLAIM: user_id}, self.reset_ttl)
