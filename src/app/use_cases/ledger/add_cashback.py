"""AddCashback Use Case

Credits cashback earned on a broker trade to the user's account.
"""

from typing import Optional
from libs.result import Result, Return
from src.domain.account import Account
from src.domain.immutable_event import EventType
from src.domain.transaction import TransactionType
from .dtos import AddCashbackCommandDTO
from .posting import LedgerPostingUseCase, Posting


class AddCashback(LedgerPostingUseCase):
    """
    Use Case: Credit cashback

    Business Rules:
    1. amount > 0 (INVALID_AMOUNT otherwise)
    2. total_earned += amount
    3. No balance check: a credit cannot break the non-negative invariant
    """

    operation = "add cashback"
    transaction_types = (TransactionType.CASHBACK,)

    async def _plan(self, command: AddCashbackCommandDTO, account: Account) -> Result[Optional[Posting]]:
        return Return.ok(
            Posting(
                transaction_type=TransactionType.CASHBACK,
                amount=command.amount,
                signed_amount=command.amount,
                event_type=EventType.CASHBACK_ADDED,
                resource_type="cashback",
            )
        )
