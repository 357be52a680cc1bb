"""
auth/validators.py -- Shape checks for credential input.

Pure functions, no I/O. Each accepts anything (None, non-str) and returns a
bool, so callers can pass raw request fields without pre-checking types.
"""

from __future__ import annotations

import re

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,6}$")
_USERNAME_RE = re.compile(r"^[a-zA-Z\s]+$")

MIN_PASSWORD_LENGTH = 6


def valid_email(value: object) -> bool:
    """Local part, '@', domain, and a 2-6 letter top-level label. No DNS check."""
    return isinstance(value, str) and _EMAIL_RE.fullmatch(value) is not None


def valid_username(value: object) -> bool:
    """True iff every character is an ASCII letter or whitespace."""
    return isinstance(value, str) and _USERNAME_RE.fullmatch(value) is not None


def valid_password(value: object) -> bool:
    return isinstance(value, str) and len(value) >= MIN_PASSWORD_LENGTH
