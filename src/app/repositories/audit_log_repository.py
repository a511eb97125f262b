"""Audit Log Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.audit_log import AuditLog


class AuditLogRepository(ABC):
    @abstractmethod
    async def create(self, audit_log: AuditLog) -> AuditLog:
        pass

    @abstractmethod
    async def get_by_transaction_id(self, transaction_id: int) -> Optional[AuditLog]:
        pass
