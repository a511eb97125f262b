"""Transaction Repository Interface

Transactions are immutable and append-only.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple
from src.domain.transaction import Transaction, TransactionType


class TransactionRepository(ABC):
    @abstractmethod
    async def create(self, transaction: Transaction) -> Transaction:
        """
        Append a transaction

        Raises:
            IntegrityError: If the user already used idempotency_key
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        pass

    @abstractmethod
    async def get_by_idempotency_key(self, user_id: str, idempotency_key: str) -> Optional[Transaction]:
        """Used to detect a retried posting. Keys are scoped to one user."""
        pass

    @abstractmethod
    async def get_latest_by_reference(
        self,
        user_id: str,
        reference_id: str,
        transaction_types: Sequence[TransactionType],
    ) -> Optional[Transaction]:
        """
        Most recent transaction of the given types for an external entity

        Used to derive the recorded state of a withdrawal or order.
        """
        pass

    @abstractmethod
    async def get_by_user_id(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        transaction_type: Optional[TransactionType] = None,
    ) -> Tuple[List[Transaction], int]:
        """
        Page through a user's transactions, newest first

        Returns:
            (transactions, total matching count)
        """
        pass
