"""Account Repository Interface

Defines the contract for account persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.account import Account, AccountTotals


class StaleAccountError(Exception):
    """Raised when a compare-and-update finds the account version changed"""

    def __init__(self, user_id: str, expected_version: int):
        super().__init__(
            f"Account for user {user_id} was modified concurrently "
            f"(expected version {expected_version})"
        )
        self.user_id = user_id
        self.expected_version = expected_version


class AccountRepository(ABC):
    """
    Repository interface for Account persistence

    Reads used by postings lock the row (SELECT FOR UPDATE); writes are
    compare-and-update on the version counter, so two writers can never
    both apply a delta to the same snapshot.
    """

    @abstractmethod
    async def get_by_user_id(self, user_id: str, for_update: bool = False) -> Optional[Account]:
        """
        Retrieve account by user ID

        Args:
            user_id: Account owner
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            Account if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """
        Create a new account

        Raises:
            IntegrityError: If an account already exists for the user
        """
        pass

    @abstractmethod
    async def update_totals(self, account: Account, totals: AccountTotals) -> Account:
        """
        Write new totals if the stored version still equals account.version

        Args:
            account: Account as read at the start of the posting
            totals: Totals to store

        Returns:
            The account reloaded with the new totals and bumped version

        Raises:
            StaleAccountError: Another writer updated the account first
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[Account]:
        pass
