"""
List Transactions Use Case

Retrieves a user's ledger history with pagination.
"""
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.transaction import TransactionType
from .dtos import ListTransactionsResponseDTO, TransactionDTO


class ListTransactions:
    """
    Use case: View ledger history

    Transactions are ordered newest first and can be narrowed to one
    transaction type.
    """

    def __init__(self, transaction_repo: TransactionRepository):
        self.transaction_repo = transaction_repo

    async def execute(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        transaction_type: Optional[TransactionType] = None,
    ) -> Result[ListTransactionsResponseDTO]:
        """
        Args:
            user_id: Account owner
            limit: Maximum number of transactions to return (default 20)
            offset: Number of transactions to skip (default 0)
            transaction_type: Only return this type when given

        Returns:
            Result[ListTransactionsResponseDTO]: Page of transactions plus total count
        """
        transactions, total = await self.transaction_repo.get_by_user_id(
            user_id=user_id,
            limit=limit,
            offset=offset,
            transaction_type=transaction_type,
        )

        return Return.ok(
            ListTransactionsResponseDTO(
                transactions=[TransactionDTO.from_entity(txn) for txn in transactions],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
