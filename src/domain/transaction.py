"""Transaction Domain Entity

Immutable append-only record of one balance-affecting action.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Enum as SAEnum, JSON, Numeric, String, UniqueConstraint
from src.domain.base import BaseModel, BigIntegerId, timestamp_column, utcnow


class TransactionType(str, Enum):
    """Ledger transaction types"""
    CASHBACK = "cashback"                              # Cashback credited
    REFERRAL = "referral"                              # Referral commission credited
    REFERRAL_REVERSED = "referral_reversed"            # Referral commission clawed back
    WITHDRAWAL_PROCESSING = "withdrawal_processing"    # Withdrawal requested, funds held
    WITHDRAWAL_COMPLETED = "withdrawal_completed"      # Withdrawal paid out
    WITHDRAWAL_CANCELLED = "withdrawal_cancelled"      # Withdrawal aborted, hold released
    ORDER_CREATED = "order_created"                    # Order reservation placed (or re-placed)
    ORDER_CANCELLED = "order_cancelled"                # Order reservation released


class Transaction(BaseModel, table=True):
    """
    Transaction - Append-only record of a ledger action

    Domain Rules:
    - Transactions are never updated or deleted
    - amount is signed: credits positive, debits negative, status markers zero
    - reference_id points at the external entity (cashback record, withdrawal
      request, order) and is not a foreign key
    - idempotency_key, when given, is unique per user
    """

    __tablename__ = "transactions"
    __table_args__ = (
        Index('ix_transactions_created_at', 'created_at'),
        Index('ix_transactions_user_reference', 'user_id', 'reference_id'),
        UniqueConstraint('user_id', 'idempotency_key', name='uq_transactions_user_idempotency_key'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerId, primary_key=True, autoincrement=True),
        description="Unique transaction identifier (auto-increment, replay order)"
    )

    user_id: str = Field(
        index=True,
        description="Account owner"
    )

    transaction_type: TransactionType = Field(
        sa_column=Column(
            "type",
            SAEnum(
                TransactionType,
                name="transaction_type",
                native_enum=False,
                length=40,
                values_callable=lambda enum: [member.value for member in enum],
            ),
            nullable=False,
        ),
        description="Kind of ledger action"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Signed amount (credits > 0, debits < 0, markers = 0)"
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="ID of the external entity that caused the action"
    )

    metadata_json: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column("metadata", JSON, nullable=False, default=dict),
        description="Free-form caller context"
    )

    idempotency_key: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Optional key making the posting safe to retry"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=timestamp_column(),
        description="Transaction timestamp (immutable)"
    )
