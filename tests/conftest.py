"""
tests/conftest.py -- Shared test fixtures for AuthFlow tests.

This module provides:
  - store:   isolated in-memory UserStore per test
  - signer:  TokenSigner with a fixed test secret
  - service: AuthService over store + signer
  - client:  TestClient over the real app with a patched lifespan

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient and run_in_threadpool execute store calls on worker
threads. Plain :memory: DBs are per-connection and would present a blank
schema to each worker thread. The named URI format
(file:name?mode=memory&cache=shared&uri=true) shares one in-memory instance
across all connections in the same process; a uuid in the name keeps tests
from seeing each other's users.

DEBUG must be set before any api/ import so get_settings() auto-generates a
SECRET_KEY instead of raising. BCRYPT_ROUNDS=4 keeps hashing fast.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# Set before any core/api import so get_settings() picks them up.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app, build_auth_service
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenSigner

TEST_SECRET = "test-secret-key-that-is-at-least-32-characters"
FAST_ROUNDS = 4


def _memory_db_url() -> str:
    return f"sqlite:///file:authflow_test_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


def _patch_lifespan(user_store: UserStore):
    """Return a lifespan that wires the test store into app.state.

    The auth service and signer are built exactly as in production, only
    around the isolated store.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.auth_service = build_auth_service(user_store)
        app.state.signer = app.state.auth_service.signer
        yield

    return test_lifespan


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    s = UserStore(_memory_db_url())
    yield s
    s.close()


@pytest.fixture
def signer() -> TokenSigner:
    return TokenSigner(TEST_SECRET)


@pytest.fixture
def service(store: UserStore, signer: TokenSigner) -> AuthService:
    return AuthService(store, signer, bcrypt_rounds=FAST_ROUNDS)


@pytest.fixture
def client(store: UserStore) -> Generator[TestClient, None, None]:
    """Yield a TestClient over the real app backed by an isolated store."""
    app.router.lifespan_context = _patch_lifespan(store)
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c
