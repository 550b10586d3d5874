# src/rowmodel/conftest.py
"""
Pytest configuration and shared fixtures.

Tests are co-located with implementation files using the *_test.py suffix.
This file provides fixtures available to all tests in the package.

Unit tests replace the rowmodel.db helpers with AsyncMocks and assert on the
SQL they receive. Integration tests need a real PostgreSQL database:

    ROWMODEL_TEST_DATABASE_URL=postgresql://localhost/rowmodel_test pytest src -v
"""

import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio

from rowmodel import db
from rowmodel.model import Boolean, DateTime, Float, Integer, Model, Serial, Text, column

# =============================================================================
# Sample Records
# =============================================================================


class User(Model):
    id: Integer = column(primary_key=True, auto=True, null=False)
    name: str = column(size=50, unique=True, null=False)
    email: str = column(size=255, unique=True, null=True)
    password: str = column(size=255, null=False)
    role: str = column(default="user")


class Product(Model):
    id: Serial = column(primary_key=True)
    name: str = column(size=50, null=False)
    price: Float = column()
    description: Text = column()
    at: DateTime = column(default="now")
    is_sel: Boolean = column(default=True)
    owner: Integer = column(null=False, foreign_key="User.id")


@pytest.fixture
def user_model():
    return User


@pytest.fixture
def product_model():
    return Product


# =============================================================================
# Database Doubles
# =============================================================================


@pytest.fixture
def fake_db():
    """
    Replace the rowmodel.db query helpers with AsyncMocks.

    Set return values on the yielded namespace before calling a model
    operation, then inspect ``call_args`` for the SQL and params.
    """
    with patch.object(db, "fetch_one", new=AsyncMock(return_value=None)) as fetch_one, \
            patch.object(db, "fetch_all", new=AsyncMock(return_value=[])) as fetch_all, \
            patch.object(db, "execute", new=AsyncMock(return_value=0)) as execute:
        yield SimpleNamespace(fetch_one=fetch_one, fetch_all=fetch_all, execute=execute)


@pytest.fixture
def fake_cursor():
    """An async cursor double with dict rows preloaded by the test."""
    cursor = AsyncMock()
    cursor.rowcount = 0
    cursor.fetchone.return_value = None
    cursor.fetchall.return_value = []
    return cursor


@pytest.fixture
def fake_connection(fake_cursor):
    """An AsyncConnection double whose cursor() yields ``fake_cursor``."""
    conn = MagicMock()
    conn.cursor.return_value.__aenter__ = AsyncMock(return_value=fake_cursor)
    conn.cursor.return_value.__aexit__ = AsyncMock(return_value=False)
    conn.commit = AsyncMock()
    conn.rollback = AsyncMock()
    conn.close = AsyncMock()
    return conn


# =============================================================================
# Database Fixtures (integration)
# =============================================================================


@pytest_asyncio.fixture
async def db_connection():
    """
    Provide a real connection with transaction rollback.

    Each test runs in a transaction that is rolled back at the end,
    ensuring tests don't affect each other. Skipped when
    ROWMODEL_TEST_DATABASE_URL is not set.
    """
    url = os.environ.get("ROWMODEL_TEST_DATABASE_URL")
    if not url:
        pytest.skip("ROWMODEL_TEST_DATABASE_URL is not set")

    conn = await db.connect(url)

    # Override the db module to use this connection
    db.set_connection_override(conn)

    yield conn

    # Rollback any changes made during the test
    await conn.rollback()
    db.clear_connection_override()
    await conn.close()
