"""Database gateway

Owns the async engine and session factory. Created by the hosting process
(API factory, worker, tests) and passed to whoever needs sessions.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers ledger tables on SQLModel.metadata


class Database:
    def __init__(self, db_uri: str, echo: bool = False):
        self.db_uri = db_uri
        self.engine = create_async_engine(db_uri, echo=echo, future=True)
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
