"""SQLAlchemy implementation of TransactionRepository

Append-only persistence for Transaction entities. Idempotency is enforced by
the unique constraint on (user_id, idempotency_key).
"""

from typing import List, Optional, Sequence, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.transaction import Transaction, TransactionType


class SqlAlchemyTransactionRepository(TransactionRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: Transaction) -> Transaction:
        """
        Append a transaction

        Raises:
            IntegrityError: If the user already used idempotency_key (duplicate posting attempt)
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        stmt = select(Transaction).where(Transaction.id == transaction_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_idempotency_key(self, user_id: str, idempotency_key: str) -> Optional[Transaction]:
        stmt = select(Transaction).where(
            Transaction.user_id == user_id,
            Transaction.idempotency_key == idempotency_key,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_latest_by_reference(
        self,
        user_id: str,
        reference_id: str,
        transaction_types: Sequence[TransactionType],
    ) -> Optional[Transaction]:
        stmt = (
            select(Transaction)
            .where(
                Transaction.user_id == user_id,
                Transaction.reference_id == reference_id,
                Transaction.transaction_type.in_(list(transaction_types)),
            )
            .order_by(Transaction.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_user_id(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        transaction_type: Optional[TransactionType] = None,
    ) -> Tuple[List[Transaction], int]:
        conditions = [Transaction.user_id == user_id]
        if transaction_type is not None:
            conditions.append(Transaction.transaction_type == transaction_type)

        count_stmt = select(func.count()).select_from(Transaction).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Transaction)
            .where(*conditions)
            .order_by(Transaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
