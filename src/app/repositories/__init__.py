from .account_repository import AccountRepository, StaleAccountError
from .transaction_repository import TransactionRepository
from .immutable_event_repository import ImmutableEventRepository
from .audit_log_repository import AuditLogRepository

__all__ = [
    "AccountRepository",
    "StaleAccountError",
    "TransactionRepository",
    "ImmutableEventRepository",
    "AuditLogRepository",
]
