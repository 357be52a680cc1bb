"""
auth/passwords.py -- bcrypt password hashing.

Using bcrypt directly rather than passlib[bcrypt] because passlib's internal
wrap-bug detection creates a password longer than 72 bytes, which bcrypt 4.x
rejects with an explicit error.

bcrypt only ever reads the first 72 bytes of a password, and bcrypt 5.x raises
on longer input instead of truncating. Passwords have no upper length bound
here, so both hash and verify cut the encoded password to 72 bytes first.
That keeps long passwords working and hashes stable across bcrypt versions.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from functools import lru_cache

import bcrypt

DEFAULT_ROUNDS = 10
_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a salted bcrypt hash of the plaintext. A fresh salt is drawn per call."""
    return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext matches the bcrypt hash.

    A malformed stored hash is a mismatch, not an error.
    """
    try:
        return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
    except ValueError:
        return False


@lru_cache
def dummy_hash(rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a throwaway hash at the given cost factor, built once per cost.

    Login verifies against this when the email is unknown. Its cost must match
    the cost of real stored hashes, or response time reveals whether an
    account exists.
    """
    return hash_password("authflow_timing_dummy", rounds)
