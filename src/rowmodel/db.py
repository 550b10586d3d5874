"""
Database connection and query utilities.

Provides a small async interface over psycopg for executing statements and
returning rows as dictionaries.

Every helper accepts an optional ``conn``. A connection supplied by the caller
is used as-is: the caller owns its transaction and its lifetime. Without one,
a connection is opened from ``config.database_url`` for the duration of the
call, committed on success and rolled back on error.

For testing, use set_connection_override() to inject a connection that will
be used instead of opening new ones. This enables transaction rollback
between tests.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import psycopg
from psycopg.rows import dict_row

from rowmodel.config import config
from rowmodel.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# =============================================================================
# Connection Override (for testing)
# =============================================================================

_connection_override: psycopg.AsyncConnection | None = None


def set_connection_override(conn: psycopg.AsyncConnection) -> None:
    """
    Set a connection to use instead of opening new ones.

    Used by test fixtures to ensure all database operations run
    within a single transaction that can be rolled back.

    Args:
        conn: The connection to use for all subsequent operations
    """
    global _connection_override
    _connection_override = conn


def clear_connection_override() -> None:
    """Clear the connection override, restoring normal behavior."""
    global _connection_override
    _connection_override = None


# =============================================================================
# Connection Management
# =============================================================================


async def connect(database_url: str | None = None) -> psycopg.AsyncConnection:
    """
    Open a new connection to ``database_url`` (or the configured URL).

    Raises:
        ConfigurationError: if no URL is given and DATABASE_URL is unset
    """
    url = database_url or config.database_url
    if not url:
        raise ConfigurationError(
            "DATABASE_URL is not set; pass a connection or configure DATABASE_URL"
        )
    return await psycopg.AsyncConnection.connect(url, connect_timeout=config.connect_timeout)


@asynccontextmanager
async def get_connection(
    conn: psycopg.AsyncConnection | None = None,
) -> AsyncIterator[psycopg.AsyncConnection]:
    """
    Async context manager for database connections.

    With ``conn`` given, or an override set (testing):
        - Yields that connection
        - Does NOT commit, rollback, or close

    Otherwise:
        - Opens a new connection
        - Commits on successful exit
        - Rolls back on exception
        - Closes connection when done

    Usage:
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute("SELECT ...")
    """
    if conn is not None:
        yield conn
        return

    if _connection_override is not None:
        yield _connection_override
        return

    conn = await connect()
    try:
        yield conn
        await conn.commit()
    except Exception:
        await conn.rollback()
        raise
    finally:
        await conn.close()


@asynccontextmanager
async def get_cursor(conn: psycopg.AsyncConnection | None = None):
    """
    Async context manager for a cursor with dict rows.

    Usage:
        async with get_cursor() as cur:
            await cur.execute('SELECT * FROM "user"')
            rows = await cur.fetchall()  # List of dicts
    """
    async with get_connection(conn) as connection:
        async with connection.cursor(row_factory=dict_row) as cur:
            yield cur


# =============================================================================
# Query Helpers
# =============================================================================


async def execute(
    query: str,
    params: tuple = None,
    conn: psycopg.AsyncConnection | None = None,
) -> int:
    """
    Execute a statement without returning rows.

    Use for UPDATE, DELETE and DDL.

    Args:
        query: SQL statement with %s placeholders
        params: Tuple of parameter values
        conn: Optional caller-owned connection

    Returns:
        Number of rows affected, as reported by the server
    """
    logger.debug("execute: %s (%d params)", query, len(params or ()))
    async with get_cursor(conn) as cur:
        await cur.execute(query, params)
        return cur.rowcount


async def fetch_one(
    query: str,
    params: tuple = None,
    conn: psycopg.AsyncConnection | None = None,
) -> dict[str, Any] | None:
    """
    Execute a query and return a single row as dict.

    Args:
        query: SQL query with %s placeholders
        params: Tuple of parameter values
        conn: Optional caller-owned connection

    Returns:
        Dict of column names to values, or None if no row found
    """
    logger.debug("fetch_one: %s (%d params)", query, len(params or ()))
    async with get_cursor(conn) as cur:
        await cur.execute(query, params)
        return await cur.fetchone()


async def fetch_all(
    query: str,
    params: tuple = None,
    conn: psycopg.AsyncConnection | None = None,
) -> list[dict[str, Any]]:
    """
    Execute a query and return all rows as list of dicts.

    Args:
        query: SQL query with %s placeholders
        params: Tuple of parameter values
        conn: Optional caller-owned connection

    Returns:
        List of dicts, empty list if no rows found
    """
    logger.debug("fetch_all: %s (%d params)", query, len(params or ()))
    async with get_cursor(conn) as cur:
        await cur.execute(query, params)
        return await cur.fetchall()
