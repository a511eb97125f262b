"""Audit Log Domain Entity

Compliance trail: what the account looked like before and after a posting.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, JSON, String
from src.domain.base import BaseModel, BigIntegerId, timestamp_column, utcnow


class AuditLog(BaseModel, table=True):
    __tablename__ = "audit_logs"
    __table_args__ = (
        Index('ix_audit_logs_resource', 'resource_type', 'resource_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerId, primary_key=True, autoincrement=True),
    )

    user_id: Optional[str] = Field(default=None, index=True)

    transaction_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            BigIntegerId,
            ForeignKey("transactions.id", ondelete="RESTRICT"),
            nullable=True,
            unique=True,
        ),
    )

    action: str = Field(sa_column=Column(String(64), nullable=False))

    resource_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
    )

    resource_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    before: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Account snapshot before the mutation"
    )

    after: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Account snapshot after the mutation"
    )

    ip_address: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
    )

    user_agent: Optional[str] = Field(
        default=None,
        sa_column=Column(String(512), nullable=True),
    )

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
