from __future__ import annotations

from typing import AsyncGenerator, Optional, Tuple

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from newsboard.config import DB_DSN


def _to_sqlalchemy_async_dsn(dsn: str | None) -> str:
    if not dsn:
        raise RuntimeError("DATABASE_URL is not configured")
    # Ensure SQLAlchemy asyncpg dialect
    if dsn.startswith("postgresql+asyncpg://"):
        return dsn
    if dsn.startswith("postgresql://"):
        return dsn.replace("postgresql://", "postgresql+asyncpg://", 1)
    if dsn.startswith("postgres://"):
        return dsn.replace("postgres://", "postgresql+asyncpg://", 1)
    # Fallback: assume already usable
    return dsn


async def init_sa_engine(
    dsn: Optional[str] = None,
) -> Tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(_to_sqlalchemy_async_dsn(dsn or DB_DSN), pool_pre_ping=True)
    sessionmaker = async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )
    return engine, sessionmaker


async def create_tables(engine: AsyncEngine) -> None:
    from newsboard.db.base import Base
    from newsboard.models import tables  # noqa: F401 ensure model registration

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_sa_engine(engine: Optional[AsyncEngine]) -> None:
    if engine is not None:
        await engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    sessionmaker = getattr(request.app.state, "sessionmaker", None)
    if sessionmaker is None:
        raise RuntimeError("SQLAlchemy engine is not initialized. Call init_sa_engine() first.")
    session = sessionmaker()
    try:
        yield session
    finally:
        await session.close()
