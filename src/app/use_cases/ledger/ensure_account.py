"""EnsureAccount Use Case

Provisions an account with zero totals the first time a user is seen.
"""

import logging
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return
from src.app.repositories.account_repository import AccountRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.account import Account
from . import errors
from .dtos import AccountDTO, EnsureAccountResponseDTO

logger = logging.getLogger(__name__)


class EnsureAccount:
    """
    Use Case: Get or create a user's account

    Business Rules:
    1. An existing account is returned untouched (created=False)
    2. A new account starts with all four totals at zero
    3. Two concurrent calls for the same user end with one row; the loser of
       the unique-constraint race reads the winner's account
    """

    def __init__(self, uow: UnitOfWork, account_repo: AccountRepository):
        self.uow = uow
        self.account_repo = account_repo

    async def execute(self, user_id: str) -> Result[EnsureAccountResponseDTO]:
        existing = await self.account_repo.get_by_user_id(user_id)
        if existing:
            return Return.ok(EnsureAccountResponseDTO(account=AccountDTO.from_entity(existing), created=False))

        try:
            account = await self.account_repo.create(Account(user_id=user_id))
            await self.uow.commit()
        except IntegrityError:
            await self.uow.rollback()
            winner = await self.account_repo.get_by_user_id(user_id)
            if not winner:
                return Return.err(errors.account_not_found(user_id))
            logger.info(f"Account for user {user_id} was provisioned concurrently")
            return Return.ok(EnsureAccountResponseDTO(account=AccountDTO.from_entity(winner), created=False))
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to provision account for user {user_id}: {e}")
            return Return.err(errors.persistence_failure("provision account", e))

        logger.info(f"Provisioned account {account.id} for user {user_id}")
        return Return.ok(EnsureAccountResponseDTO(account=AccountDTO.from_entity(account), created=True))
