"""Request schemas for Ledger API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator

from src.domain.status import WithdrawalStatus


class LedgerPostingRequestSchema(BaseModel):
    """
    Fields shared by every balance-affecting request

    Sign and precision of amount are checked by the use case, which reports
    INVALID_AMOUNT.
    """

    user_id: str = Field(
        ...,
        min_length=1,
        description="Account owner (required, non-empty)"
    )

    amount: Decimal = Field(
        ...,
        description="Amount in currency units (must be > 0, at most 2 decimal places)"
    )

    reference_id: str = Field(
        ...,
        min_length=1,
        description="ID of the external entity (cashback record, withdrawal, order)"
    )

    metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Optional context stored on the transaction"
    )

    idempotency_key: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Repeat-safe key; replays return the first result"
    )

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        """Reject NaN and infinities, which cannot be compared or stored"""
        if not v.is_finite():
            raise ValueError("Amount must be a finite number")
        return v


class CashbackRequestSchema(LedgerPostingRequestSchema):
    """Used for POST /ledger/cashback"""

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_4f2a",
                "amount": "50.00",
                "reference_id": "cashback_8812",
                "metadata": {"broker": "acme", "trade_volume": "2.5"},
                "idempotency_key": "cashback_8812"
            }
        }


class ReferralCommissionRequestSchema(LedgerPostingRequestSchema):
    """Used for POST /ledger/referrals"""


class ReverseReferralCommissionRequestSchema(LedgerPostingRequestSchema):
    """Used for POST /ledger/referrals/reverse"""

    reason: str = Field(
        ...,
        min_length=1,
        description="Why the commission is clawed back"
    )


class WithdrawalRequestSchema(LedgerPostingRequestSchema):
    """Used for POST /ledger/withdrawals"""

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_4f2a",
                "amount": "30.00",
                "reference_id": "wd_1029",
                "metadata": {"method": "bank_transfer"}
            }
        }


class OrderRequestSchema(LedgerPostingRequestSchema):
    """Used for POST /ledger/orders"""


class WithdrawalStatusRequestSchema(LedgerPostingRequestSchema):
    """
    Used for POST /ledger/withdrawals/status

    amount is the withdrawal amount being completed or cancelled.
    """

    old_status: WithdrawalStatus = Field(..., description="Status the caller believes is current")
    new_status: WithdrawalStatus = Field(..., description="Requested status")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_4f2a",
                "amount": "30.00",
                "reference_id": "wd_1029",
                "old_status": "processing",
                "new_status": "completed"
            }
        }


class OrderStatusRequestSchema(LedgerPostingRequestSchema):
    """Used for POST /ledger/orders/status"""

    old_status: str = Field(..., min_length=1, description="Store status the caller believes is current")
    new_status: str = Field(..., min_length=1, description="Requested store status")
