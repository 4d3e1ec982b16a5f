"""
PostgreSQL connection utilities shared by the bot and the reload CLI, using asyncpg.

Explicit arguments win over the environment; anything left as None is taken
from DatabaseConfig.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import asyncpg

from libs.db.config import get_db_config

SCHEMA_FILE = Path(__file__).parent / "schema.sql"


def connection_params(**overrides: Any) -> dict:
    """
    Merge explicit connection settings over the environment config.

    Raises:
        ValueError: If host, database or user is still missing
    """
    params = get_db_config().to_dict()
    params.update({key: value for key, value in overrides.items() if value is not None})

    missing = [key for key in ("host", "port", "database", "user") if not params.get(key)]
    if missing:
        raise ValueError(f"Missing required database connection parameters: {', '.join(missing)}")
    return params


async def get_db_connection(
    host: Optional[str] = None,
    port: Optional[int] = None,
    database: Optional[str] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    timeout: Optional[float] = None,
    verbose: bool = True,
) -> asyncpg.Connection:
    """Open a single connection, e.g. for schema setup or a health check."""
    params = connection_params(host=host, port=port, database=database, user=user, password=password)
    if timeout is not None:
        params["timeout"] = timeout

    if verbose:
        print(f"Connecting to PostgreSQL at {params['host']}:{params['port']}/{params['database']}...")

    try:
        conn = await asyncpg.connect(**params)
    except (asyncpg.PostgresError, OSError) as e:
        raise ConnectionError(f"Failed to connect to database: {e}") from e

    if verbose:
        print("Successfully connected to database")
    return conn


async def create_db_pool(
    min_size: int = 2,
    max_size: int = 10,
    verbose: bool = True,
    **pool_options: Any,
) -> asyncpg.Pool:
    """
    Create an asyncpg pool from the environment config.

    Args:
        min_size: Connections opened up front
        max_size: Upper bound on pooled connections
        verbose: Print progress (CLI use)
        **pool_options: Forwarded to asyncpg.create_pool (command_timeout, setup, ...)

    Raises:
        ValueError: If required settings are missing
        ConnectionError: If PostgreSQL cannot be reached
    """
    params = connection_params()

    if verbose:
        print(f"Creating connection pool for PostgreSQL at {params['host']}:{params['port']}/{params['database']}...")

    try:
        pool = await asyncpg.create_pool(**params, min_size=min_size, max_size=max_size, **pool_options)
    except (asyncpg.PostgresError, OSError) as e:
        raise ConnectionError(f"Failed to create database connection pool: {e}") from e

    if verbose:
        print("Successfully created database connection pool")
    return pool


async def apply_schema(conn: asyncpg.Connection, schema_file: Path = SCHEMA_FILE) -> None:
    """Create the dotaboard schema and tables if they do not exist yet."""
    ddl = schema_file.read_text(encoding="utf-8")
    await conn.execute(ddl)
