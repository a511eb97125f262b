"""Immutable Event Domain Entity

Structured snapshot of the business inputs behind a transaction, so the
narrative (and the account totals) can be rebuilt without reading metadata.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, JSON, String
from src.domain.base import BaseModel, BigIntegerId, timestamp_column, utcnow


class EventType(str, Enum):
    CASHBACK_ADDED = "CASHBACK_ADDED"
    REFERRAL_ADDED = "REFERRAL_ADDED"
    REFERRAL_REVERSED = "REFERRAL_REVERSED"
    WITHDRAWAL_CREATED = "WITHDRAWAL_CREATED"
    WITHDRAWAL_STATUS_CHANGED = "WITHDRAWAL_STATUS_CHANGED"
    ORDER_CREATED = "ORDER_CREATED"
    ORDER_STATUS_CHANGED = "ORDER_STATUS_CHANGED"


class ImmutableEvent(BaseModel, table=True):
    """
    Immutable Event - one per transaction

    event_data always carries the unsigned "amount" that was applied to the
    account totals; reconciliation replays it.
    """

    __tablename__ = "immutable_events"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerId, primary_key=True, autoincrement=True),
    )

    transaction_id: int = Field(
        sa_column=Column(
            BigIntegerId,
            ForeignKey("transactions.id", ondelete="RESTRICT"),
            nullable=False,
            unique=True,
        ),
        description="Transaction this event describes"
    )

    event_type: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Business event name (see EventType)"
    )

    event_data: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False, default=dict),
        description="Snapshot of the inputs that produced the transaction"
    )

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
