"""
auth/models.py -- Domain dataclass for the user entity.

Pattern: Data class (pure data container, zero logic). The store and the
service do the work; this module owns the shape.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is unique across users and stored exactly as submitted.
    hashed_password is a bcrypt hash; the plaintext is never held here.
    id is None until the store assigns one on insert.
    """

    name: str
    email: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
