"""SQLAlchemy Unit of Work

One AsyncSession is one ledger transaction boundary. Leaving the context
without committing discards every pending write of the posting.
"""

import logging
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is not None:
            logger.warning(f"Discarding ledger writes after {exc_type.__name__}: {exc}")
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        if self.session.in_transaction():
            await self.session.rollback()
