"""CreateWithdrawal Use Case

Places a withdrawal in processing: the amount moves from the available
balance into total_pending_withdrawals until it is completed or cancelled.
"""

from typing import Optional
from libs.result import Result, Return
from src.domain.account import Account
from src.domain.immutable_event import EventType
from src.domain.status import WithdrawalStatus
from src.domain.transaction import TransactionType
from .dtos import CreateWithdrawalCommandDTO
from .posting import LedgerPostingUseCase, Posting


class CreateWithdrawal(LedgerPostingUseCase):
    """
    Use Case: Request a withdrawal

    Business Rules:
    1. amount > 0
    2. available_balance >= amount, checked on the locked account row
    3. total_pending_withdrawals += amount
    4. Transaction(withdrawal_processing, -amount)
    """

    operation = "create withdrawal"
    transaction_types = (TransactionType.WITHDRAWAL_PROCESSING,)

    async def _plan(self, command: CreateWithdrawalCommandDTO, account: Account) -> Result[Optional[Posting]]:
        insufficient = self._require_available(account, command.amount)
        if insufficient:
            return Return.err(insufficient)

        return Return.ok(
            Posting(
                transaction_type=TransactionType.WITHDRAWAL_PROCESSING,
                amount=command.amount,
                signed_amount=-command.amount,
                event_type=EventType.WITHDRAWAL_CREATED,
                resource_type="withdrawal",
                metadata={"status": WithdrawalStatus.PROCESSING.value},
                event_data={
                    "status": WithdrawalStatus.PROCESSING.value,
                    "available_balance_before": str(account.available_balance),
                },
            )
        )
