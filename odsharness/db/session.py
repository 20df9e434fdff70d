from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from odsharness.config import DatabaseConfig
from odsharness.db.models import AdminBase, SecurityBase


class Databases:
    """Engines and session factories for the admin and security databases.

    Constructed once by the composition root and passed to whatever needs
    a session.  Nothing in the harness keeps a module-level engine.
    """

    def __init__(self, admin_engine: AsyncEngine, security_engine: AsyncEngine) -> None:
        self.admin_engine = admin_engine
        self.security_engine = security_engine
        self._admin_factory = async_sessionmaker(
            bind=admin_engine, class_=AsyncSession, expire_on_commit=False
        )
        self._security_factory = async_sessionmaker(
            bind=security_engine, class_=AsyncSession, expire_on_commit=False
        )

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> Databases:
        return cls(
            create_async_engine(config.admin_url, echo=config.echo),
            create_async_engine(config.security_url, echo=config.echo),
        )

    async def init(self) -> None:
        """Create any missing tables in both databases."""
        async with self.admin_engine.begin() as conn:
            await conn.run_sync(AdminBase.metadata.create_all)
        async with self.security_engine.begin() as conn:
            await conn.run_sync(SecurityBase.metadata.create_all)

    async def close(self) -> None:
        await self.admin_engine.dispose()
        await self.security_engine.dispose()

    @asynccontextmanager
    async def admin_session(self) -> AsyncGenerator[AsyncSession, None]:
        async with _transaction(self._admin_factory) as session:
            yield session

    @asynccontextmanager
    async def security_session(self) -> AsyncGenerator[AsyncSession, None]:
        async with _transaction(self._security_factory) as session:
            yield session


@asynccontextmanager
async def _transaction(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
