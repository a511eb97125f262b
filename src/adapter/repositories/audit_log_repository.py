"""SQLAlchemy implementation of AuditLogRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.audit_log_repository import AuditLogRepository
from src.domain.audit_log import AuditLog


class SqlAlchemyAuditLogRepository(AuditLogRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_log: AuditLog) -> AuditLog:
        self.session.add(audit_log)
        await self.session.flush()
        await self.session.refresh(audit_log)
        return audit_log

    async def get_by_transaction_id(self, transaction_id: int) -> Optional[AuditLog]:
        stmt = select(AuditLog).where(AuditLog.transaction_id == transaction_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
