"""SQLAlchemy implementation of ImmutableEventRepository"""

from decimal import Decimal
from typing import List, Optional, Tuple
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.immutable_event_repository import ImmutableEventRepository
from src.domain.immutable_event import ImmutableEvent
from src.domain.transaction import Transaction, TransactionType


class SqlAlchemyImmutableEventRepository(ImmutableEventRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, event: ImmutableEvent) -> ImmutableEvent:
        self.session.add(event)
        await self.session.flush()
        await self.session.refresh(event)
        return event

    async def get_by_transaction_id(self, transaction_id: int) -> Optional[ImmutableEvent]:
        stmt = select(ImmutableEvent).where(ImmutableEvent.transaction_id == transaction_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_replay_entries(self, user_id: str) -> List[Tuple[TransactionType, Decimal]]:
        stmt = (
            select(Transaction.transaction_type, ImmutableEvent.event_data)
            .join(ImmutableEvent, ImmutableEvent.transaction_id == Transaction.id)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.id)
        )
        result = await self.session.execute(stmt)
        return [
            (TransactionType(transaction_type), Decimal(str(event_data["amount"])))
            for transaction_type, event_data in result.all()
        ]
