"""SQLAlchemy implementation of AccountRepository

Provides persistence for Account entities with row locking on read and a
version-checked UPDATE on write.
"""

from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.account_repository import AccountRepository, StaleAccountError
from src.domain.account import Account, AccountTotals
from src.domain.base import utcnow


class SqlAlchemyAccountRepository(AccountRepository):
    """
    SQLAlchemy implementation of AccountRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE (ignored by SQLite)
    - Compare-and-update on the version column, effective on every backend
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: str, for_update: bool = False) -> Optional[Account]:
        """
        Retrieve account by user ID with optional row-level locking

        A locking read always repopulates the identity map so the posting
        works from the row as stored, not from a copy loaded earlier.
        """
        stmt = select(Account).where(Account.user_id == user_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, account: Account) -> Account:
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def update_totals(self, account: Account, totals: AccountTotals) -> Account:
        """
        Store new totals guarded by the version read at the start of the posting

        Raises:
            StaleAccountError: No row matched id and version
        """
        expected_version = account.version
        stmt = (
            update(Account)
            .where(Account.id == account.id, Account.version == expected_version)
            .values(
                total_earned=totals.total_earned,
                total_withdrawn=totals.total_withdrawn,
                total_pending_withdrawals=totals.total_pending_withdrawals,
                total_orders=totals.total_orders,
                version=expected_version + 1,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount != 1:
            raise StaleAccountError(account.user_id, expected_version)

        await self.session.refresh(account)
        return account

    async def get_all(self) -> List[Account]:
        stmt = select(Account).order_by(Account.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
