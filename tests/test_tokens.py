"""Unit tests for auth/tokens.py -- JWT issue/verify.

Covers:
- issue -> verify round-trip returns the claims plus iat/exp
- session and reset tokens carry different claim names and lifetimes
- wrong secret, tampered payload, garbage input, and expiry raise InvalidToken
- issue() does not mutate the caller's claims dict
"""

from datetime import timedelta

import pytest

from auth.errors import InvalidToken
from auth.tokens import RESET_CLAIM, SESSION_CLAIM, TokenSigner

SECRET = "unit-test-secret-key-with-32-plus-chars"


@pytest.fixture
def signer() -> TokenSigner:
    return TokenSigner(SECRET)


class TestRoundTrip:
    def test_claims_survive(self, signer: TokenSigner) -> None:
        token = signer.issue({"id": 7, "scope": "x"}, timedelta(hours=1))
        claims = signer.verify(token)
        assert claims["id"] == 7
        assert claims["scope"] == "x"
        assert claims["exp"] - claims["iat"] == 3600

    def test_caller_claims_not_mutated(self, signer: TokenSigner) -> None:
        claims = {"id": 1}
        signer.issue(claims, timedelta(minutes=5))
        assert claims == {"id": 1}

    def test_session_token(self, signer: TokenSigner) -> None:
        claims = signer.verify(signer.issue_session_token(42))
        assert claims[SESSION_CLAIM] == 42
        assert RESET_CLAIM not in claims
        assert claims["exp"] - claims["iat"] == 24 * 3600

    def test_reset_token(self, signer: TokenSigner) -> None:
        claims = signer.verify(signer.issue_reset_token(42))
        assert claims[RESET_CLAIM] == 42
        assert SESSION_CLAIM not in claims
        assert claims["exp"] - claims["iat"] == 3600

    def test_custom_lifetimes(self) -> None:
        s = TokenSigner(SECRET, session_ttl=timedelta(minutes=10), reset_ttl=timedelta(minutes=2))
        session = s.verify(s.issue_session_token(1))
        reset = s.verify(s.issue_reset_token(1))
        assert session["exp"] - session["iat"] == 600
        assert reset["exp"] - reset["iat"] == 120


class TestRejection:
    def test_expired_token(self, signer: TokenSigner) -> None:
        token = signer.issue({"id": 1}, timedelta(seconds=-1))
        with pytest.raises(InvalidToken, match="expired"):
            signer.verify(token)

    def test_wrong_secret(self, signer: TokenSigner) -> None:
        token = TokenSigner("another-secret-key-that-is-32-chars-long").issue_session_token(1)
        with pytest.raises(InvalidToken):
            signer.verify(token)

    def test_tampered_payload(self, signer: TokenSigner) -> None:
        header, _payload, signature = signer.issue_session_token(1).split(".")
        forged_payload = TokenSigner(SECRET + "x").issue_session_token(999).split(".")[1]
        with pytest.raises(InvalidToken):
            signer.verify(f"{header}.{forged_payload}.{signature}")

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    def test_malformed(self, signer: TokenSigner, token: str) -> None:
        with pytest.raises(InvalidToken):
            signer.verify(token)

    def test_invalid_token_is_401(self) -> None:
        assert InvalidToken("x").status_code == 401


def test_empty_secret_rejected() -> None:
    with pytest.raises(ValueError):
        TokenSigner("")
