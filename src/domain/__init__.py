from .base import BaseModel
from .account import Account, AccountTotals
from .transaction import Transaction, TransactionType
from .immutable_event import ImmutableEvent, EventType
from .audit_log import AuditLog
from .status import WithdrawalStatus, WITHDRAWAL_TRANSITIONS, is_order_cancelled
from .ledger_rules import apply_entry, replay

__all__ = [
    "BaseModel",
    "Account",
    "AccountTotals",
    "Transaction",
    "TransactionType",
    "ImmutableEvent",
    "EventType",
    "AuditLog",
    "WithdrawalStatus",
    "WITHDRAWAL_TRANSITIONS",
    "is_order_cancelled",
    "apply_entry",
    "replay",
]
