"""
tests/conftest.py -- Shared test fixtures for ProductDesk.

This module provides:
  - user_store / product_store: fresh in-memory stores for unit tests
  - _make_test_stores(): isolated named shared-memory DBs for the API client
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient plus a pre-created user and its bearer token

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
for the API client because TestClient runs sync route handlers in a thread
pool. Plain :memory: DBs are per-connection and would present a blank schema
to each worker thread.

DEBUG, RATE_LIMIT_ENABLED and BCRYPT_ROUNDS must be set before any
core/auth import: get_settings() is cached on first use.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set before any auth/core import so get_settings() auto-generates
# SECRET_KEY in dev mode, the limiter starts disabled, and bcrypt is fast.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password
from products.store import ProductStore

OWNER_EMAIL = "owner@example.com"
OWNER_PASSWORD = "Owner123!"


# ---------------------------------------------------------------------------
# Unit-test stores
# ---------------------------------------------------------------------------


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def product_store() -> Generator[ProductStore, None, None]:
    store = ProductStore("sqlite:///:memory:")
    yield store
    store.close()


# ---------------------------------------------------------------------------
# API client helpers
# ---------------------------------------------------------------------------


def _make_test_stores() -> tuple[UserStore, ProductStore]:
    """Create isolated named shared-memory SQLite stores.

    The random suffix keeps module-scoped clients from seeing each other's rows.
    """
    suffix = uuid.uuid4().hex[:8]
    user_store = UserStore(f"sqlite:///file:test_auth_{suffix}?mode=memory&cache=shared&uri=true")
    product_store = ProductStore(f"sqlite:///file:test_products_{suffix}?mode=memory&cache=shared&uri=true")
    return user_store, product_store


def _patch_lifespan(user_store: UserStore, product_store: ProductStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.product_store = product_store
        yield

    return test_lifespan


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def signup_via_api(client: TestClient, name: str, email: str, password: str = "Passw0rd!") -> tuple[str, int]:
    """Register through the API and return (token, user_id)."""
    resp = client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    data = resp.json()
    return data["token"], data["user"]["id"]


# ---------------------------------------------------------------------------
# Module-scoped API client -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The user (OWNER_EMAIL / OWNER_PASSWORD) is created directly in the store
    before the client starts; the token is minted the same way login does.
    """
    user_store, product_store = _make_test_stores()

    uid = user_store.create_user(
        User(name="Owner One", email=OWNER_EMAIL, hashed_password=hash_password(OWNER_PASSWORD))
    )
    token = create_access_token(uid)

    app.router.lifespan_context = _patch_lifespan(user_store, product_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, uid

    user_store.close()
    product_store.close()
