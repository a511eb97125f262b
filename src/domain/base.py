from datetime import datetime, timezone
from sqlalchemy import BigInteger, Column, DateTime, Integer
from sqlmodel import SQLModel

# SQLite only auto-increments an INTEGER PRIMARY KEY column.
BigIntegerId = BigInteger().with_variant(Integer(), "sqlite")


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def timestamp_column(**kwargs) -> Column:
    return Column(DateTime(timezone=True), nullable=False, **kwargs)


class BaseModel(SQLModel):
    pass
