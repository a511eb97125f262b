"""GetAvailableBalance Use Case

Computes the spendable amount of a user's account.
"""

from libs.result import Result, Return
from src.app.repositories.account_repository import AccountRepository
from . import errors
from .dtos import AvailableBalanceDTO


class GetAvailableBalance:
    """
    Get Available Balance Use Case

    Read-only. available_balance is derived on every call from the stored
    totals and clamped at zero:

        max(0, total_earned - total_withdrawn - total_pending_withdrawals - total_orders)
    """

    def __init__(self, account_repo: AccountRepository):
        """
        Args:
            account_repo: Repository for accessing accounts
        """
        self.account_repo = account_repo

    async def execute(self, user_id: str) -> Result[AvailableBalanceDTO]:
        """
        Args:
            user_id: The account owner

        Returns:
            Result[AvailableBalanceDTO]: The totals and the derived balance

        Errors:
            ACCOUNT_NOT_FOUND: User has no account
        """
        account = await self.account_repo.get_by_user_id(user_id)

        if not account:
            return Return.err(errors.account_not_found(user_id))

        totals = account.totals()
        return Return.ok(
            AvailableBalanceDTO(
                user_id=account.user_id,
                total_earned=totals.total_earned,
                total_withdrawn=totals.total_withdrawn,
                total_pending_withdrawals=totals.total_pending_withdrawals,
                total_orders=totals.total_orders,
                available_balance=totals.available_balance,
            )
        )
