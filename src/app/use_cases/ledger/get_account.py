"""GetAccount Use Case"""

from libs.result import Result, Return
from src.app.repositories.account_repository import AccountRepository
from . import errors
from .dtos import AccountDTO


class GetAccount:
    """Read-only lookup of a user's account and its four totals."""

    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    async def execute(self, user_id: str) -> Result[AccountDTO]:
        account = await self.account_repo.get_by_user_id(user_id)
        if not account:
            return Return.err(errors.account_not_found(user_id))
        return Return.ok(AccountDTO.from_entity(account))
