"""Account Domain Entity

One account per user holding four running totals. The spendable amount is
derived from them and never stored.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Integer, Numeric
from src.domain.base import BaseModel, BigIntegerId, timestamp_column, utcnow
from src.domain.money import ZERO, to_money


@dataclass(frozen=True)
class AccountTotals:
    """Immutable snapshot of an account's four running totals"""

    total_earned: Decimal = ZERO
    total_withdrawn: Decimal = ZERO
    total_pending_withdrawals: Decimal = ZERO
    total_orders: Decimal = ZERO

    @property
    def available_balance(self) -> Decimal:
        available = (
            self.total_earned
            - self.total_withdrawn
            - self.total_pending_withdrawals
            - self.total_orders
        )
        return max(ZERO, to_money(available))

    def as_dict(self) -> Dict[str, str]:
        """JSON-safe snapshot used in audit logs"""
        return {
            "total_earned": str(to_money(self.total_earned)),
            "total_withdrawn": str(to_money(self.total_withdrawn)),
            "total_pending_withdrawals": str(to_money(self.total_pending_withdrawals)),
            "total_orders": str(to_money(self.total_orders)),
            "available_balance": str(self.available_balance),
        }


class Account(BaseModel, table=True):
    """
    Account - Per-user aggregate of running monetary totals

    Domain Rules:
    - One account per user (user_id is unique)
    - All four totals are non-negative
    - Totals change only through ledger postings
    - version is bumped on every write (compare-and-update)
    - Accounts are never deleted
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint('total_earned >= 0', name='total_earned_non_negative'),
        CheckConstraint('total_withdrawn >= 0', name='total_withdrawn_non_negative'),
        CheckConstraint('total_pending_withdrawals >= 0', name='total_pending_withdrawals_non_negative'),
        CheckConstraint('total_orders >= 0', name='total_orders_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerId, primary_key=True, autoincrement=True),
        description="Unique account identifier (auto-increment)"
    )

    user_id: str = Field(
        index=True,
        unique=True,
        description="Owner of the account (one account per user)"
    )

    total_earned: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Cashback and referral commissions credited"
    )

    total_withdrawn: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Withdrawals paid out"
    )

    total_pending_withdrawals: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Withdrawals requested and still processing"
    )

    total_orders: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Funds reserved against active store orders"
    )

    version: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Optimistic concurrency counter"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=timestamp_column(),
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=timestamp_column(),
        description="Last totals update timestamp"
    )

    def totals(self) -> AccountTotals:
        return AccountTotals(
            total_earned=to_money(self.total_earned),
            total_withdrawn=to_money(self.total_withdrawn),
            total_pending_withdrawals=to_money(self.total_pending_withdrawals),
            total_orders=to_money(self.total_orders),
        )

    @property
    def available_balance(self) -> Decimal:
        return self.totals().available_balance

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "user_id": "user_4f2a",
                "total_earned": "150.00",
                "total_withdrawn": "20.00",
                "total_pending_withdrawals": "30.00",
                "total_orders": "0.00",
                "version": 4,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }
