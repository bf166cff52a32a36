# newsboard/db/pool.py
from __future__ import annotations

import logging
from typing import AsyncIterator, Optional

import asyncpg
from fastapi import Request

from newsboard.config import DB_COMMAND_TIMEOUT, DB_DSN, DB_POOL_MAX_SIZE, DB_POOL_MIN_SIZE

logger = logging.getLogger("newsboard.db")


def _to_asyncpg_dsn(dsn: str | None) -> str:
    if not dsn:
        raise RuntimeError("DATABASE_URL is not configured")
    # asyncpg does not understand SQLAlchemy dialect prefixes
    if dsn.startswith("postgresql+asyncpg://"):
        return dsn.replace("postgresql+asyncpg://", "postgresql://", 1)
    return dsn


async def connect_db(dsn: Optional[str] = None) -> asyncpg.pool.Pool:
    pool = await asyncpg.create_pool(
        dsn=_to_asyncpg_dsn(dsn or DB_DSN),
        min_size=DB_POOL_MIN_SIZE,
        max_size=DB_POOL_MAX_SIZE,
        command_timeout=DB_COMMAND_TIMEOUT,
    )
    logger.info("asyncpg pool opened", extra={"event": "db_pool_open"})
    return pool


async def close_db(pool: Optional[asyncpg.pool.Pool]) -> None:
    if pool is not None:
        await pool.close()
        logger.info("asyncpg pool closed", extra={"event": "db_pool_close"})


async def get_conn(request: Request) -> AsyncIterator[asyncpg.Connection]:
    """FastAPI dependency: one pooled connection for the duration of a request."""
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise RuntimeError("Database pool is not initialized. Call connect_db() first.")
    async with pool.acquire() as conn:
        yield conn
