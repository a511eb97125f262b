"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from src.domain.account import Account
from src.domain.audit_log import AuditLog
from src.domain.immutable_event import ImmutableEvent
from src.domain.status import WithdrawalStatus
from src.domain.transaction import Transaction


class PostingCommandDTO(BaseModel):
    """
    Fields shared by every balance-affecting command

    amount is validated by the use case (not here) so that a non-positive
    value is reported as INVALID_AMOUNT rather than a schema error.
    """

    user_id: str = Field(..., description="Account owner")

    amount: Decimal = Field(..., description="Amount in currency units, at most 2 decimal places")

    reference_id: str = Field(
        ...,
        description="ID of the external entity (cashback record, withdrawal, order)"
    )

    metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Free-form context stored on the transaction"
    )

    idempotency_key: Optional[str] = Field(
        default=None,
        description="Repeat-safe key; a second posting with the same key returns the first"
    )

    ip_address: Optional[str] = Field(default=None, description="Caller IP for the audit log")

    user_agent: Optional[str] = Field(default=None, description="Caller user agent for the audit log")


class AddCashbackCommandDTO(PostingCommandDTO):
    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_4f2a",
                "amount": "50.00",
                "reference_id": "cashback_8812",
                "metadata": {"broker": "acme", "trade_volume": "2.5"}
            }
        }


class AddReferralCommissionCommandDTO(PostingCommandDTO):
    pass


class ReverseReferralCommissionCommandDTO(PostingCommandDTO):
    reason: str = Field(..., min_length=1, description="Why the commission is clawed back")


class CreateWithdrawalCommandDTO(PostingCommandDTO):
    pass


class CreateOrderCommandDTO(PostingCommandDTO):
    pass


class ChangeWithdrawalStatusCommandDTO(PostingCommandDTO):
    old_status: WithdrawalStatus = Field(..., description="Status the caller believes is current")
    new_status: WithdrawalStatus = Field(..., description="Requested status")


class ChangeOrderStatusCommandDTO(PostingCommandDTO):
    old_status: str = Field(..., min_length=1, description="Store status the caller believes is current")
    new_status: str = Field(..., min_length=1, description="Requested store status")


class AccountDTO(BaseModel):
    user_id: str
    total_earned: Decimal
    total_withdrawn: Decimal
    total_pending_withdrawals: Decimal
    total_orders: Decimal
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, account: Account) -> "AccountDTO":
        totals = account.totals()
        return cls(
            user_id=account.user_id,
            total_earned=totals.total_earned,
            total_withdrawn=totals.total_withdrawn,
            total_pending_withdrawals=totals.total_pending_withdrawals,
            total_orders=totals.total_orders,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class AvailableBalanceDTO(BaseModel):
    """
    Response DTO for the balance query

    available_balance = max(0, earned - withdrawn - pending - orders)
    """

    user_id: str
    total_earned: Decimal
    total_withdrawn: Decimal
    total_pending_withdrawals: Decimal
    total_orders: Decimal
    available_balance: Decimal

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_4f2a",
                "total_earned": "150.00",
                "total_withdrawn": "20.00",
                "total_pending_withdrawals": "30.00",
                "total_orders": "0.00",
                "available_balance": "100.00"
            }
        }


class EnsureAccountResponseDTO(BaseModel):
    account: AccountDTO
    created: bool = Field(..., description="True when this call provisioned the account")


class TransactionDTO(BaseModel):
    id: int
    user_id: str
    transaction_type: str
    amount: Decimal
    reference_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    idempotency_key: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, transaction: Transaction) -> "TransactionDTO":
        transaction_type = transaction.transaction_type
        return cls(
            id=transaction.id,
            user_id=transaction.user_id,
            transaction_type=transaction_type.value if hasattr(transaction_type, "value") else transaction_type,
            amount=transaction.amount,
            reference_id=transaction.reference_id,
            metadata=transaction.metadata_json or {},
            idempotency_key=transaction.idempotency_key,
            created_at=transaction.created_at,
        )


class ImmutableEventDTO(BaseModel):
    id: int
    transaction_id: int
    event_type: str
    event_data: Dict[str, Any]
    created_at: datetime

    @classmethod
    def from_entity(cls, event: ImmutableEvent) -> "ImmutableEventDTO":
        return cls(
            id=event.id,
            transaction_id=event.transaction_id,
            event_type=event.event_type,
            event_data=event.event_data,
            created_at=event.created_at,
        )


class AuditLogDTO(BaseModel):
    id: int
    user_id: Optional[str] = None
    transaction_id: Optional[int] = None
    action: str
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, audit_log: AuditLog) -> "AuditLogDTO":
        return cls(
            id=audit_log.id,
            user_id=audit_log.user_id,
            transaction_id=audit_log.transaction_id,
            action=audit_log.action,
            resource_type=audit_log.resource_type,
            resource_id=audit_log.resource_id,
            before=audit_log.before,
            after=audit_log.after,
            ip_address=audit_log.ip_address,
            user_agent=audit_log.user_agent,
            created_at=audit_log.created_at,
        )


class LedgerEntryResponseDTO(BaseModel):
    """
    Composite result of a posting

    All four artifacts were written in the same database transaction.
    """

    transaction: TransactionDTO
    event: ImmutableEventDTO
    audit_log: AuditLogDTO
    updated_account: AccountDTO


class ListTransactionsResponseDTO(BaseModel):
    transactions: List[TransactionDTO]
    total: int
    limit: int
    offset: int


class AccountDiscrepancyDTO(BaseModel):
    """One account whose stored totals differ from its replayed event log"""

    user_id: str
    stored: Dict[str, Decimal] = Field(..., description="Totals as stored on the account")
    replayed: Dict[str, Decimal] = Field(..., description="Totals rebuilt from the event log")
    mismatched_fields: List[str] = Field(..., description="Names of the totals that differ")


class ReconciliationResultDTO(BaseModel):
    total_accounts_checked: int
    discrepancies_found: int
    discrepancies: List[AccountDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
