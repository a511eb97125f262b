from .account_repository import SqlAlchemyAccountRepository
from .transaction_repository import SqlAlchemyTransactionRepository
from .immutable_event_repository import SqlAlchemyImmutableEventRepository
from .audit_log_repository import SqlAlchemyAuditLogRepository

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyImmutableEventRepository",
    "SqlAlchemyAuditLogRepository",
]
